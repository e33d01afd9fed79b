#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_schema.py
"""Unit tests for document validation and the schema cache.

Downloads go through ``httpx.MockTransport`` so no test touches the network.

"""

import json
import logging
import os
import time

import httpx
import pytest

from doc2conf.adf.nodes import Document, Paragraph, Text
from doc2conf.exceptions import InvalidDocumentError
from doc2conf.schema import SchemaCache, SchemaState, ValidationReport, check_root, validate_document

SCHEMA_URL = "https://schemas.example.com/adf.json"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _serving(schema: dict, calls: list) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json=schema)

    return _client(handler)


def _failing(status: int = 500) -> httpx.Client:
    return _client(lambda request: httpx.Response(status, text="unavailable"))


@pytest.mark.unit
class TestRootCheck:
    """Tests for the root type check."""

    def test_doc_root_accepted(self) -> None:
        """Test nodes and wire dicts with a doc root."""
        check_root(Document())
        check_root({"type": "doc", "version": 1, "content": []})

    @pytest.mark.parametrize("doc", [Paragraph(), {"type": "paragraph"}, {}, None])
    def test_other_roots_rejected(self, doc) -> None:
        """Test that any other root raises."""
        with pytest.raises(InvalidDocumentError, match='must have type "doc"'):
            check_root(doc)

    def test_root_type_recorded(self) -> None:
        """Test that the offending type is kept on the error."""
        with pytest.raises(InvalidDocumentError) as excinfo:
            check_root(Paragraph())
        assert excinfo.value.root_type == "paragraph"


@pytest.mark.unit
class TestValidateDocument:
    """Tests for validate_document."""

    def test_default_skips_schema(self) -> None:
        """Test that only the root is checked by default."""
        assert validate_document(Document()) == ValidationReport(valid=True, errors=(), schema_checked=False)

    def test_conforming_document(self, schema_cache: SchemaCache) -> None:
        """Test a document that satisfies the schema."""
        report = validate_document(Document(), use_official_schema=True, schema_cache=schema_cache)

        assert report.valid
        assert report.schema_checked
        assert report.errors == ()

    def test_violations_are_reported_not_raised(self, minimal_schema, caplog) -> None:
        """Test that schema violations are logged and returned."""
        minimal_schema["properties"]["content"] = {"type": "array", "minItems": 1}
        cache = SchemaCache.from_schema(minimal_schema)

        with caplog.at_level(logging.WARNING, logger="doc2conf.schema"):
            report = validate_document(Document(), use_official_schema=True, schema_cache=cache)

        assert not report.valid
        assert report.schema_checked
        assert len(report.errors) == 1
        assert report.errors[0].startswith("$.content")
        assert "ADF schema violation" in caplog.text

    def test_wire_dict_input(self, schema_cache: SchemaCache) -> None:
        """Test validation of an already serialized document."""
        data = {"type": "doc", "version": 1, "content": [{"type": "paragraph", "content": []}]}
        assert validate_document(data, use_official_schema=True, schema_cache=schema_cache).valid

    def test_root_checked_before_schema(self, schema_cache: SchemaCache) -> None:
        """Test that a bad root raises even with schema validation on."""
        with pytest.raises(InvalidDocumentError):
            validate_document(Paragraph(content=[Text(text="x")]), use_official_schema=True, schema_cache=schema_cache)

    def test_unresolvable_reference_skips_check(self, minimal_schema, caplog) -> None:
        """Test that a schema failing during validation does not stop the conversion."""
        minimal_schema["properties"]["content"] = {"$ref": "#/definitions/absent"}
        cache = SchemaCache.from_schema(minimal_schema)

        with caplog.at_level(logging.WARNING, logger="doc2conf.schema"):
            report = validate_document(Document(), use_official_schema=True, schema_cache=cache)

        assert report == ValidationReport()
        assert "could not run" in caplog.text

    def test_unavailable_schema_skips_check(self) -> None:
        """Test that validation continues when the schema cannot be loaded."""
        cache = SchemaCache(cache_path=None, url=SCHEMA_URL, client=_failing())

        report = validate_document(Document(), use_official_schema=True, schema_cache=cache)
        assert report == ValidationReport()


@pytest.mark.unit
class TestSchemaCache:
    """Tests for loading, caching and refreshing the schema."""

    def test_downloads_and_writes_cache(self, tmp_path, minimal_schema) -> None:
        """Test a first load with no local copy."""
        calls: list = []
        path = tmp_path / "cache" / "schema.json"
        cache = SchemaCache(cache_path=path, url=SCHEMA_URL, client=_serving(minimal_schema, calls))

        assert cache.get() == minimal_schema
        assert cache.state is SchemaState.READY
        assert calls == [SCHEMA_URL]
        assert json.loads(path.read_text(encoding="utf-8")) == minimal_schema

    def test_loads_once(self, tmp_path, minimal_schema) -> None:
        """Test that later calls reuse the loaded schema."""
        calls: list = []
        cache = SchemaCache(cache_path=tmp_path / "s.json", url=SCHEMA_URL, client=_serving(minimal_schema, calls))

        cache.get()
        cache.get()
        assert len(calls) == 1

    def test_fresh_cache_file_skips_download(self, tmp_path, minimal_schema) -> None:
        """Test that a recent local copy is used without a request."""
        path = tmp_path / "s.json"
        path.write_text(json.dumps(minimal_schema), encoding="utf-8")
        calls: list = []
        cache = SchemaCache(cache_path=path, url=SCHEMA_URL, client=_serving({"type": "object"}, calls))

        assert cache.get() == minimal_schema
        assert calls == []

    def test_stale_cache_is_refreshed(self, tmp_path, minimal_schema) -> None:
        """Test that an old local copy is replaced by a download."""
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"type": "object"}), encoding="utf-8")
        old = time.time() - 3600
        os.utime(path, (old, old))
        calls: list = []
        cache = SchemaCache(cache_path=path, url=SCHEMA_URL, max_age=60, client=_serving(minimal_schema, calls))

        assert cache.get() == minimal_schema
        assert len(calls) == 1

    def test_stale_cache_used_when_download_fails(self, tmp_path, minimal_schema, caplog) -> None:
        """Test the fallback to an outdated copy."""
        path = tmp_path / "s.json"
        path.write_text(json.dumps(minimal_schema), encoding="utf-8")
        cache = SchemaCache(cache_path=path, url=SCHEMA_URL, max_age=-1, client=_failing())

        assert cache.get() == minimal_schema
        assert "stale copy" in caplog.text

    def test_failed_download_without_cache(self, tmp_path) -> None:
        """Test that a failed first load returns None and can be retried."""
        cache = SchemaCache(cache_path=tmp_path / "s.json", url=SCHEMA_URL, client=_failing(500))

        assert cache.get() is None
        assert cache.state is SchemaState.UNINITIALIZED

    def test_non_object_schema_rejected(self, tmp_path) -> None:
        """Test that a JSON array is not accepted as a schema."""
        client = _client(lambda request: httpx.Response(200, json=[1, 2]))
        cache = SchemaCache(cache_path=tmp_path / "s.json", url=SCHEMA_URL, client=client)

        assert cache.get() is None

    def test_unreadable_cache_file_is_ignored(self, tmp_path, minimal_schema) -> None:
        """Test that a corrupt local copy triggers a download."""
        path = tmp_path / "s.json"
        path.write_text("{broken", encoding="utf-8")
        calls: list = []
        cache = SchemaCache(cache_path=path, url=SCHEMA_URL, client=_serving(minimal_schema, calls))

        assert cache.get() == minimal_schema
        assert len(calls) == 1

    def test_clear(self, schema_cache: SchemaCache) -> None:
        """Test that clearing resets the state."""
        schema_cache.clear()
        assert schema_cache.state is SchemaState.UNINITIALIZED
