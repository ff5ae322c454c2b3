"""
Document store behaviour against a temporary data directory.
"""
from __future__ import annotations

import json
import sys
import threading
from pathlib import Path

import pytest

# Make the package importable when running the tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from servicedesk.core import config as core_config  # noqa: E402
from servicedesk.core.errors import StorageUnavailableError  # noqa: E402
from servicedesk.repositories import json_storage  # noqa: E402


@pytest.fixture()
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    core_config.get_settings.cache_clear()
    yield tmp_path
    core_config.get_settings.cache_clear()


def test_missing_document_reads_as_empty(data_dir):
    result = json_storage.read("data.json")
    assert result.found is False
    assert result.data == {}
    assert json_storage.load("data.json") == {}


def test_corrupt_document_is_not_silently_emptied(data_dir):
    (data_dir / "data.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageUnavailableError):
        json_storage.load("data.json")


def test_non_object_document_is_rejected(data_dir):
    (data_dir / "data.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageUnavailableError):
        json_storage.read("data.json")


def test_save_pretty_prints_and_keeps_unicode(data_dir):
    json_storage.save("data.json", {"alerts": [{"message": "تنبيه"}]})
    raw = (data_dir / "data.json").read_text(encoding="utf-8")
    assert "تنبيه" in raw
    assert raw.startswith("{\n  ")
    assert json_storage.read("data.json").found is True
    assert list(data_dir.glob("*.tmp")) == []


def test_update_preserves_other_keys(data_dir):
    json_storage.save("data.json", {"services": [{"name": "Likes"}], "extra": 1})
    with json_storage.update("data.json") as doc:
        json_storage.collection(doc, "requests").append({"id": 1})
    saved = json.loads((data_dir / "data.json").read_text(encoding="utf-8"))
    assert saved == {"services": [{"name": "Likes"}], "extra": 1, "requests": [{"id": 1}]}


def test_update_does_not_write_when_block_fails(data_dir):
    json_storage.save("data.json", {"services": []})
    with pytest.raises(RuntimeError):
        with json_storage.update("data.json") as doc:
            doc["services"].append({"name": "half"})
            raise RuntimeError("boom")
    assert json_storage.load("data.json") == {"services": []}


def test_concurrent_updates_do_not_lose_writes(data_dir):
    def bump():
        for _ in range(10):
            with json_storage.update("data.json") as doc:
                json_storage.collection(doc, "requests").append(len(doc["requests"]) + 1)

    threads = [threading.Thread(target=bump) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert json_storage.load("data.json")["requests"] == list(range(1, 81))


def test_document_names_stay_inside_data_dir(data_dir):
    with pytest.raises(ValueError):
        json_storage.document_path("../escape.json")
