# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

import pytest
from fastsearch.config import get_cfg, reload_cfg
from fastsearch.stores.memory_store import MemoryStore
from utils import SpyStore

COMPANY_YAML = """\
name: Company
attributes:
  collection_name: companies
  default_sorting_field: num_employees
fields:
  - {name: company_name, type: str}
  - {name: num_employees, type: int32, attributes: [facet]}
"""

@pytest.fixture(autouse=True)
def _reset_cfg_between_tests(monkeypatch):
    for k in ("FASTSEARCH_STORE__TYPE", "FASTSEARCH_SCHEMA__STRICT_SORT_TYPE"):
        monkeypatch.delenv(k, raising=False)
    reload_cfg()
    cfg = get_cfg()
    cfg.set("store.type", "memory")
    cfg.set("schema.strict_sort_type", False)
    yield

@pytest.fixture()
def cfg():
    return get_cfg()

@pytest.fixture()
def store():
    return SpyStore(MemoryStore())

@pytest.fixture()
def company_yaml(tmp_path):
    path = tmp_path / "company.yml"
    path.write_text(COMPANY_YAML, encoding="utf-8")
    return path
