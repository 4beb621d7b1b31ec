# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging
import pytest
import fastsearch.log as ops_log
from fastsearch.service import create_collection, do_search
from fastsearch.builder import build_schema


@pytest.fixture(autouse=True)
def reset():
    """Reset ops_log singleton state before and after each test."""
    ops_log.configure(None)
    yield
    ops_log.configure(None)


def test_emit_noop_when_not_configured(capsys):
    ops_log.emit(op="search", collection="c", latency_ms=1.0, status="ok")
    assert capsys.readouterr().out == ""


def test_configure_stdout_emits_json(capsys):
    ops_log.configure("stdout")
    ops_log.emit(op="search", collection="c", k=5, hits=3, latency_ms=12.5, status="ok")
    data = json.loads(capsys.readouterr().out.strip())
    assert data["op"] == "search"
    assert data["collection"] == "c"
    assert data["k"] == 5
    assert data["hits"] == 3
    assert "ts" in data


def test_none_fields_dropped(capsys):
    ops_log.configure("stdout")
    ops_log.emit(op="index_document", collection="c", docid="d1", status="ok",
                 error_code=None)
    data = json.loads(capsys.readouterr().out.strip())
    assert "error_code" not in data
    assert data["docid"] == "d1"


def test_configure_null_string_disables(capsys):
    ops_log.configure("stdout")
    ops_log.configure("null")
    ops_log.emit(op="search", collection="c", status="ok")
    assert capsys.readouterr().out == ""


def test_configure_file_and_reconfigure(tmp_path):
    p1 = tmp_path / "first.jsonl"
    p2 = tmp_path / "second.jsonl"
    ops_log.configure(str(p1))
    ops_log.emit(op="search", collection="c", status="ok")
    ops_log.configure(str(p2))
    ops_log.emit(op="index_document", collection="c", status="ok")
    ops_log.emit(op="delete_document", collection="c", status="ok")
    ops_log.close()
    assert len(p1.read_text().strip().splitlines()) == 1
    lines = p2.read_text().strip().splitlines()
    assert [json.loads(l)["op"] for l in lines] == ["index_document", "delete_document"]


def test_ts_format(capsys):
    ops_log.configure("stdout")
    ops_log.emit(op="search", status="ok")
    ts = json.loads(capsys.readouterr().out.strip())["ts"]
    assert ts.endswith("Z")
    assert len(ts) == 24


def test_close_noop_when_not_configured():
    ops_log.close()


def test_ops_event_on_service_calls(store, capsys):
    ops_log.configure("stdout")
    create_collection(store, build_schema("Note", None, [("text", str)]))
    do_search(store, "note", "x", k=3)
    lines = [json.loads(l) for l in capsys.readouterr().out.strip().splitlines()]
    assert lines[0]["op"] == "create_collection"
    assert lines[0]["collection"] == "note"
    assert lines[0]["status"] == "ok"
    assert lines[1]["op"] == "search"
    assert lines[1]["collection"] == "note"
    assert lines[1]["k"] == 3
    assert lines[1]["hits"] == 0
    assert "latency_ms" in lines[1]


def test_ops_event_records_error_code(store, capsys):
    ops_log.configure("stdout")
    with pytest.raises(Exception):
        do_search(store, "missing", "x")
    data = json.loads(capsys.readouterr().out.strip())
    assert data["status"] == "error"
    assert data["error_code"] == "collection_not_found"


def test_get_logger_children():
    assert ops_log.get_logger() is ops_log.LOG
    assert ops_log.get_logger("builder").name == "fastsearch.builder"


def test_color_formatter_plain():
    fmt = ops_log._ColorFormatter("%(levelname)s %(name)s: %(message)s", "%H:%M:%S",
                                  use_color=False)
    rec = logging.LogRecord("fastsearch", logging.INFO, __file__, 1, "hello", None, None)
    assert fmt.format(rec) == "INFO fastsearch: hello"
