#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/schema.py
"""ADF document validation.

Validation has two levels:

1. The root check. A document whose root is not ``doc`` is rejected with
   :class:`~doc2conf.exceptions.InvalidDocumentError`. This is the only
   validation failure that ever leaves the library.
2. The official schema check. When enabled, the tree is validated against
   the published ADF JSON schema with ``jsonschema``. Violations are logged
   and reported, never raised.

The published schema is held by a :class:`SchemaCache`. The cache reads a
local copy first, downloads the schema with ``httpx`` when the copy is
missing or stale, and writes the download back. A process-wide instance is
returned by :func:`get_default_schema_cache`; tests and embedders can pass
their own.

"""

from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from doc2conf.adf.nodes import Node, get_node_type
from doc2conf.adf.serialization import adf_to_dict
from doc2conf.constants import (
    ADF_SCHEMA_URL,
    DEFAULT_SCHEMA_CACHE_PATH,
    DEFAULT_SCHEMA_FETCH_TIMEOUT,
    DEFAULT_SCHEMA_MAX_AGE_SECONDS,
    DEPS_SCHEMA,
    INVALID_ROOT_MESSAGE,
)
from doc2conf.exceptions import DependencyError, InvalidDocumentError, SchemaError
from doc2conf.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

DocumentLike = Union[Node, Mapping[str, Any]]


class SchemaState(Enum):
    """Lifecycle of a :class:`SchemaCache`."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class SchemaCache:
    """Lazily loaded, file-backed copy of the official ADF JSON schema.

    The first :meth:`get` call loads the schema under a lock, so concurrent
    callers trigger a single load. A failed load leaves the cache
    ``UNINITIALIZED`` and the next call tries again.

    Parameters
    ----------
    cache_path : str, Path or None, default "cache/adf-schema.json"
        Local copy of the schema. None disables the file cache.
    url : str
        Schema download location
    max_age : float, default 7 days
        Age in seconds after which the local copy is refreshed
    timeout : float, default 30.0
        Download timeout in seconds
    client : httpx.Client or None
        HTTP client to use. A short-lived client is created per download
        when omitted.

    """

    def __init__(
        self,
        cache_path: Union[str, Path, None] = DEFAULT_SCHEMA_CACHE_PATH,
        url: str = ADF_SCHEMA_URL,
        max_age: float = DEFAULT_SCHEMA_MAX_AGE_SECONDS,
        timeout: float = DEFAULT_SCHEMA_FETCH_TIMEOUT,
        client: Any = None,
    ) -> None:
        self.cache_path = Path(cache_path) if cache_path is not None else None
        self.url = url
        self.max_age = max_age
        self.timeout = timeout
        self.client = client
        self.state = SchemaState.UNINITIALIZED
        self._schema: Optional[dict[str, Any]] = None
        self._lock = threading.Lock()

    @classmethod
    def from_schema(cls, schema: Mapping[str, Any]) -> SchemaCache:
        """Build a cache that is already ``READY`` with ``schema``."""
        cache = cls(cache_path=None)
        cache._schema = dict(schema)
        cache.state = SchemaState.READY
        return cache

    def get(self) -> Optional[dict[str, Any]]:
        """Return the schema, loading it on first use.

        Returns
        -------
        dict or None
            The schema, or None when no copy could be read or downloaded

        """
        if self.state is SchemaState.READY:
            return self._schema

        with self._lock:
            if self.state is SchemaState.READY:
                return self._schema

            self.state = SchemaState.LOADING
            try:
                schema = self._load()
            except (SchemaError, DependencyError) as e:
                logger.warning(f"ADF schema unavailable, skipping schema validation: {e}")
                self.state = SchemaState.UNINITIALIZED
                return None

            self._schema = schema
            self.state = SchemaState.READY
            return schema

    def clear(self) -> None:
        """Forget the loaded schema; the file cache is left in place."""
        with self._lock:
            self._schema = None
            self.state = SchemaState.UNINITIALIZED

    def _load(self) -> dict[str, Any]:
        cached, fresh = self._read_cache()
        if cached is not None and fresh:
            logger.debug(f"Loaded ADF schema from {self.cache_path}")
            return cached

        try:
            schema = self._fetch()
        except SchemaError:
            if cached is not None:
                logger.warning(f"Could not refresh ADF schema, using stale copy at {self.cache_path}")
                return cached
            raise

        self._write_cache(schema)
        return schema

    def _read_cache(self) -> tuple[Optional[dict[str, Any]], bool]:
        """Read the local copy; returns (schema or None, is fresh)."""
        if self.cache_path is None or not self.cache_path.is_file():
            return None, False
        try:
            schema = json.loads(self.cache_path.read_text(encoding="utf-8"))
            age = time.time() - self.cache_path.stat().st_mtime
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable schema cache {self.cache_path}: {e}")
            return None, False
        if not isinstance(schema, dict):
            logger.warning(f"Ignoring schema cache {self.cache_path}: not a JSON object")
            return None, False
        return schema, age <= self.max_age

    @requires_dependencies("schema", DEPS_SCHEMA)
    def _fetch(self) -> dict[str, Any]:
        import httpx

        logger.info(f"Downloading ADF schema from {self.url}")
        try:
            if self.client is not None:
                response = self.client.get(self.url)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(self.url)
            response.raise_for_status()
            schema = response.json()
        except httpx.HTTPError as e:
            raise SchemaError(f"Failed to download ADF schema: {e}", source=self.url, original_error=e) from e
        except ValueError as e:
            raise SchemaError(f"ADF schema is not valid JSON: {e}", source=self.url, original_error=e) from e

        if not isinstance(schema, dict):
            raise SchemaError("ADF schema is not a JSON object", source=self.url)
        return schema

    def _write_cache(self, schema: dict[str, Any]) -> None:
        if self.cache_path is None:
            return
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_text(json.dumps(schema), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write schema cache {self.cache_path}: {e}")
        else:
            logger.debug(f"Wrote ADF schema cache to {self.cache_path}")


_default_cache: Optional[SchemaCache] = None
_default_cache_lock = threading.Lock()


def get_default_schema_cache() -> SchemaCache:
    """Return the process-wide schema cache, creating it on first use."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = SchemaCache()
        return _default_cache


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of :func:`validate_document`.

    Parameters
    ----------
    valid : bool
        False when the official schema reported violations
    errors : tuple of str
        One message per violation, prefixed by its JSON path
    schema_checked : bool
        Whether the official schema check actually ran

    """

    valid: bool = True
    errors: tuple[str, ...] = ()
    schema_checked: bool = False


def check_root(doc: DocumentLike) -> None:
    """Raise InvalidDocumentError unless the root node is a ``doc``.

    Parameters
    ----------
    doc : Node or Mapping
        Tree or wire dict to check

    Raises
    ------
    InvalidDocumentError
        If the root type is not ``doc``

    """
    root_type = get_node_type(doc)
    if root_type != "doc":
        raise InvalidDocumentError(INVALID_ROOT_MESSAGE, root_type=root_type)


def validate_document(
    doc: DocumentLike,
    *,
    use_official_schema: bool = False,
    schema_cache: Optional[SchemaCache] = None,
) -> ValidationReport:
    """Validate an ADF document.

    Parameters
    ----------
    doc : Node or Mapping
        Document tree or its wire dict
    use_official_schema : bool, default False
        Also validate against the published ADF JSON schema
    schema_cache : SchemaCache or None
        Schema source, the process-wide cache when omitted

    Returns
    -------
    ValidationReport
        Schema check outcome. Schema violations are logged as warnings.

    Raises
    ------
    InvalidDocumentError
        If the root type is not ``doc``

    """
    check_root(doc)
    if not use_official_schema:
        return ValidationReport()

    schema = (schema_cache or get_default_schema_cache()).get()
    if schema is None:
        return ValidationReport()

    data = adf_to_dict(doc) if isinstance(doc, Node) else dict(doc)
    return _validate_against_schema(data, schema)


@requires_dependencies("schema", DEPS_SCHEMA)
def _validate_against_schema(data: dict[str, Any], schema: dict[str, Any]) -> ValidationReport:
    from jsonschema.exceptions import SchemaError as JsonSchemaError
    from jsonschema.validators import validator_for

    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except JsonSchemaError as e:
        logger.warning(f"ADF schema is itself invalid, skipping schema validation: {e.message}")
        return ValidationReport()

    validator = validator_cls(schema)
    try:
        errors = sorted(validator.iter_errors(data), key=lambda error: error.json_path)
    except Exception as e:
        # Unresolvable references and similar failures surface only while iterating
        logger.warning(f"ADF schema validation could not run, skipping it: {e!r}")
        return ValidationReport()

    messages = tuple(f"{error.json_path}: {error.message}" for error in errors)
    for message in messages:
        logger.warning(f"ADF schema violation at {message}")

    if messages:
        logger.warning(f"Document does not conform to the ADF schema ({len(messages)} issues)")
    else:
        logger.debug("Document conforms to the ADF schema")
    return ValidationReport(valid=not messages, errors=messages, schema_checked=True)
