"""Pytest configuration and shared fixtures for the doc2conf test suite.

This module provides shared fixtures, test configuration, and fake
collaborators (asset uploaders, a pre-populated schema cache) that are used
across the entire test suite.
"""

import copy
from pathlib import Path
from typing import Any, Union

import pytest

from doc2conf.exceptions import UploadError
from doc2conf.schema import SchemaCache
from doc2conf.uploads import UploadResult


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


class RecordingUploader:
    """Asset store that records every upload and hands out sequential ids."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Path]] = []

    def upload(self, space_key: Any, file_path: Union[str, Path]) -> UploadResult:
        path = Path(file_path)
        self.calls.append((space_key, path))
        return UploadResult(id=f"att{len(self.calls)}", file_name=path.name)


class FailingUploader:
    """Asset store that rejects every upload."""

    def upload(self, space_key: Any, file_path: Union[str, Path]) -> UploadResult:
        raise UploadError("asset store unavailable", file_path=str(file_path))


MINIMAL_DOC_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["type", "version", "content"],
    "properties": {
        "type": {"const": "doc"},
        "version": {"const": 1},
        "content": {"type": "array"},
    },
}


@pytest.fixture
def recording_uploader() -> RecordingUploader:
    """Provide an uploader that records calls."""
    return RecordingUploader()


@pytest.fixture
def failing_uploader() -> FailingUploader:
    """Provide an uploader whose uploads always fail."""
    return FailingUploader()


@pytest.fixture
def minimal_schema() -> dict[str, Any]:
    """Provide a small JSON schema describing a ``doc`` root."""
    return copy.deepcopy(MINIMAL_DOC_SCHEMA)


@pytest.fixture
def schema_cache(minimal_schema: dict[str, Any]) -> SchemaCache:
    """Provide a schema cache that is already loaded and never touches the network."""
    return SchemaCache.from_schema(minimal_schema)


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """Provide a small CSV file in a temporary directory.

    Returns
    -------
    Path
        Path to ``data.csv`` holding a header row and two data rows.

    """
    path = tmp_path / "data.csv"
    path.write_text("name,qty\nbolts,12\nnuts,30\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_markdown() -> str:
    """Provide sample Markdown content covering the common block kinds."""
    return """# Release notes

Some **bold** and *italic* text with `code`.

## Checklist

- [ ] Tag the release
- [x] Build artifacts

```python
print("hello")
```

| Area | Owner |
|------|-------|
| API  | Ana   |
"""
