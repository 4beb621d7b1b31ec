# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import sys
import textwrap
import pytest
from fastsearch import cli as fscli


def test_cli_schema_prints_payload(company_yaml, capsys):
    rc = fscli.main_cli(["schema", str(company_yaml)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["name"] == "companies"
    assert out["default_sorting_field"] == "num_employees"
    assert out["fields"][1] == {"name": "num_employees", "type": "int32", "facet": True}

def test_cli_schema_output_is_reproducible(company_yaml, capsys):
    fscli.main_cli(["schema", str(company_yaml), "--indent", "2"])
    first = capsys.readouterr().out
    fscli.main_cli(["schema", str(company_yaml), "--indent", "2"])
    assert capsys.readouterr().out == first

def test_cli_schema_selects_collection(tmp_path, capsys):
    decl = tmp_path / "many.yml"
    decl.write_text(textwrap.dedent("""\
        types:
          - name: A
            fields: [{name: x, type: str}]
          - name: B
            fields: [{name: y, type: int}]
        """), encoding="utf-8")
    fscli.main_cli(["schema", str(decl)])
    assert [s["name"] for s in json.loads(capsys.readouterr().out)] == ["a", "b"]

    fscli.main_cli(["schema", str(decl), "--collection", "b"])
    assert json.loads(capsys.readouterr().out)["fields"] == [{"name": "y", "type": "int64"}]

    with pytest.raises(SystemExit):
        fscli.main_cli(["schema", str(decl), "--collection", "zzz"])

def test_cli_check_ok(company_yaml, capsys):
    rc = fscli.main_cli(["check", str(company_yaml)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {"ok": True, "types": [
        {"collection": "companies", "fields": 2, "default_sorting_field": "num_employees"},
    ]}

def test_cli_check_reports_error_envelope(company_yaml, capsys):
    company_yaml.write_text(
        company_yaml.read_text().replace("[facet]", "[facets]"), encoding="utf-8")
    rc = fscli.main_cli(["check", str(company_yaml)])
    assert rc == 1
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert out["code"] == "unknown_attribute"
    assert out["type"] == "Company"
    assert out["field"] == "num_employees"
    assert out["attribute"] == "facets"

def test_cli_schema_reports_error_envelope(tmp_path, capsys):
    decl = tmp_path / "bad.yml"
    decl.write_text("name: T\nattributes: {default_sorting_field: nope}\n"
                    "fields: [{name: a, type: str}]\n", encoding="utf-8")
    assert fscli.main_cli(["schema", str(decl)]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["code"] == "dangling_sort_field"
    assert out["field"] == "nope"

def test_cli_missing_file_is_a_declaration_error(tmp_path, capsys):
    assert fscli.main_cli(["check", str(tmp_path / "missing.yml")]) == 1
    assert json.loads(capsys.readouterr().out)["code"] == "declaration_format"

def test_cli_imports_document_class(tmp_path, monkeypatch, capsys):
    mod = tmp_path / "fs_models_ok.py"
    mod.write_text(textwrap.dedent("""\
        from dataclasses import dataclass
        from typing import Annotated
        from fastsearch import document, FACET, Int32

        @document(collection_name="companies", default_sorting_field="num_employees")
        @dataclass
        class Company:
            company_name: str
            num_employees: Annotated[Int32, FACET]
        """), encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    assert fscli.main_cli(["schema", "fs_models_ok:Company"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["fields"][1] == {"name": "num_employees", "type": "int32", "facet": True}

def test_cli_import_time_schema_error(tmp_path, monkeypatch, capsys):
    mod = tmp_path / "fs_models_bad.py"
    mod.write_text(textwrap.dedent("""\
        from dataclasses import dataclass
        from typing import Annotated
        from fastsearch import document, FACET

        @document
        @dataclass
        class Company:
            country_code: Annotated[str, FACET, FACET]
        """), encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "fs_models_bad", raising=False)
    assert fscli.main_cli(["check", "fs_models_bad:Company"]) == 1
    assert json.loads(capsys.readouterr().out)["code"] == "duplicate_attribute"

def test_cli_import_target_not_a_document(tmp_path, monkeypatch):
    (tmp_path / "fs_models_plain.py").write_text("class Plain:\n    pass\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    with pytest.raises(SystemExit):
        fscli.main_cli(["schema", "fs_models_plain:Plain"])
    with pytest.raises(SystemExit):
        fscli.main_cli(["schema", "fs_models_plain:Missing"])

def test_cli_config_flag(tmp_path, company_yaml, capsys):
    cfg_file = tmp_path / "config.yml"
    cfg_file.write_text("schema:\n  strict_sort_type: true\n", encoding="utf-8")
    decl = tmp_path / "t.yml"
    decl.write_text("name: T\nattributes: {default_sorting_field: a}\n"
                    "fields: [{name: a, type: str}]\n", encoding="utf-8")
    assert fscli.main_cli(["--config", str(cfg_file), "check", str(decl)]) == 1
    assert json.loads(capsys.readouterr().out)["code"] == "unsortable_field"

@pytest.mark.parametrize("attrs", ["[5]", "[null]", "[[facet]]", "[[facet, true, x]]"])
def test_cli_malformed_attributes_report_envelope(tmp_path, capsys, attrs):
    decl = tmp_path / "bad_attrs.yml"
    decl.write_text("name: T\nfields:\n"
                    f"  - {{name: a, type: str, attributes: {attrs}}}\n", encoding="utf-8")
    assert fscli.main_cli(["check", str(decl)]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["ok"] is False
    assert out["code"] == "declaration_format"
