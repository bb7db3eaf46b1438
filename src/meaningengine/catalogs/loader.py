"""Catalog loader.

Turns a registry description into a concrete ``{catalog_id: catalog}``
mapping. A description maps catalog ids either to inline catalogs or to
path strings::

    {
        "$schema": "...",
        "version": "1.0.0",
        "catalogs": {
            "tools": "./catalogs/tools.json",
            "ai": {"id": "ai", "entries": [...]},
        },
    }

Paths are handed to an injected loader function (sync or async); the
loader itself never touches a file system or network. Loading is best
effort: a path that fails to resolve is recorded in its ``LoadOutcome``
and left out of the result, it never aborts the whole load.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from meaningengine.config import LoaderConfig
from meaningengine.contracts.validators import CatalogValidator
from meaningengine.contracts.validators import ContractViolation
from meaningengine.models.records import Catalog
from meaningengine.models.results import ValidationResult
from meaningengine.observability import record_query

logger = logging.getLogger(__name__)

FileLoader = Callable[[str], "Catalog | None"]
AsyncFileLoader = Callable[[str], Awaitable["Catalog | None"]]

# Keys describing the registry itself rather than a catalog
RESERVED_KEYS = frozenset({"version", "description"})
RESERVED_PREFIX = "$"

_DRIVE_RE = re.compile(r"^[a-zA-Z]:")
_TRAILING_SEP_RE = re.compile(r"[/\\]$")


def is_reserved_key(key: str) -> bool:
    """Return True for registry keys that never name a catalog."""
    return key.startswith(RESERVED_PREFIX) or key in RESERVED_KEYS


@dataclass(frozen=True)
class LoadOutcome:
    """Result of resolving one registry key.

    Exactly one of ``catalog`` and ``error`` is set.
    """

    catalog_id: str
    source: str
    catalog: Catalog | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.catalog is not None


@dataclass(frozen=True)
class _PendingPath:
    catalog_id: str
    path: str


class CatalogLoader:
    """Resolves registry descriptions into catalog sets."""

    def __init__(self, config: LoaderConfig | None = None) -> None:
        self._config = config or LoaderConfig()

    # ------------------------------------------------------------------
    # Path handling
    # ------------------------------------------------------------------

    @staticmethod
    def resolve_path(path: str, base_path: str = "") -> str:
        """Resolve *path* against *base_path*.

        Absolute paths (leading ``/`` or a drive letter) pass through
        unchanged. A leading ``./`` is stripped and the remainder joined to
        the base with a single ``/``.
        """
        if not path:
            return ""
        if path.startswith("/") or _DRIVE_RE.match(path):
            return path

        relative = path[2:] if path.startswith("./") else path
        if not base_path:
            return relative
        base = _TRAILING_SEP_RE.sub("", base_path)
        return f"{base}/{relative}"

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def collect(
        self,
        registry: object,
        *,
        load_file: FileLoader | None = None,
        base_path: str | None = None,
    ) -> dict[str, LoadOutcome]:
        """Resolve every catalog key and report one outcome per key."""
        start = perf_counter()
        outcomes, pending = self._split(registry, base_path)
        for item in pending:
            outcomes[item.catalog_id] = _resolve(item, load_file)
        _record("catalog_loader.load", start, outcomes)
        return outcomes

    def load(
        self,
        registry: object,
        *,
        load_file: FileLoader | None = None,
        base_path: str | None = None,
    ) -> dict[str, Catalog]:
        """Load what can be loaded; failed keys are simply absent."""
        outcomes = self.collect(registry, load_file=load_file, base_path=base_path)
        return _successes(outcomes)

    # ------------------------------------------------------------------
    # Async
    # ------------------------------------------------------------------

    async def collect_async(
        self,
        registry: object,
        *,
        load_file_async: AsyncFileLoader | None = None,
        base_path: str | None = None,
    ) -> dict[str, LoadOutcome]:
        """Resolve every path concurrently and merge outcomes by key."""
        start = perf_counter()
        outcomes, pending = self._split(registry, base_path)
        resolved = await asyncio.gather(
            *(_resolve_async(item, load_file_async) for item in pending)
        )
        for outcome in resolved:
            outcomes[outcome.catalog_id] = outcome
        _record("catalog_loader.load_async", start, outcomes)
        return outcomes

    async def load_async(
        self,
        registry: object,
        *,
        load_file_async: AsyncFileLoader | None = None,
        base_path: str | None = None,
    ) -> dict[str, Catalog]:
        outcomes = await self.collect_async(
            registry, load_file_async=load_file_async, base_path=base_path
        )
        return _successes(outcomes)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def validate(catalogs: object) -> ValidationResult:
        return CatalogValidator.validate(catalogs)

    def load_and_validate(
        self,
        registry: object,
        *,
        load_file: FileLoader | None = None,
        base_path: str | None = None,
    ) -> dict[str, Catalog]:
        """Load catalogs and raise ``ContractViolation`` if the set is invalid."""
        catalogs = self.load(registry, load_file=load_file, base_path=base_path)
        validation = self.validate(catalogs)
        if not validation.valid:
            msg = f"Invalid catalogs: {', '.join(validation.errors)}"
            raise ContractViolation(msg, validation.errors)
        return catalogs

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _split(
        self, registry: object, base_path: str | None
    ) -> tuple[dict[str, LoadOutcome], list[_PendingPath]]:
        """Separate inline catalogs from path references."""
        outcomes: dict[str, LoadOutcome] = {}
        pending: list[_PendingPath] = []
        if not isinstance(registry, Mapping):
            return outcomes, pending

        wrapped = registry.get(self._config.catalogs_key)
        catalogs_map = wrapped if isinstance(wrapped, Mapping) else registry
        base = self._config.base_path if base_path is None else base_path

        for catalog_id, value in catalogs_map.items():
            if not isinstance(catalog_id, str) or is_reserved_key(catalog_id):
                continue
            if isinstance(value, str):
                pending.append(
                    _PendingPath(catalog_id, self.resolve_path(value, base))
                )
            elif isinstance(value, Mapping):
                outcomes[catalog_id] = LoadOutcome(
                    catalog_id=catalog_id, source="inline", catalog=value
                )
            else:
                logger.debug(
                    "skipping catalog %s: unsupported value %s",
                    catalog_id,
                    type(value).__name__,
                )
        return outcomes, pending


def _resolve(item: _PendingPath, load_file: FileLoader | None) -> LoadOutcome:
    if load_file is None:
        return _failed(item, "no file loader configured")
    try:
        catalog = load_file(item.path)
    except Exception as exc:
        return _failed(item, f"loader raised: {exc}")
    return _loaded(item, catalog)


async def _resolve_async(
    item: _PendingPath, load_file_async: AsyncFileLoader | None
) -> LoadOutcome:
    if load_file_async is None:
        return _failed(item, "no async file loader configured")
    try:
        catalog = await load_file_async(item.path)
    except Exception as exc:
        return _failed(item, f"loader raised: {exc}")
    return _loaded(item, catalog)


def _loaded(item: _PendingPath, catalog: Any) -> LoadOutcome:
    if not catalog:
        return _failed(item, "loader returned no catalog")
    return LoadOutcome(catalog_id=item.catalog_id, source=item.path, catalog=catalog)


def _failed(item: _PendingPath, reason: str) -> LoadOutcome:
    logger.warning(
        "skipping catalog %s from %s: %s", item.catalog_id, item.path, reason
    )
    return LoadOutcome(catalog_id=item.catalog_id, source=item.path, error=reason)


def _successes(outcomes: Mapping[str, LoadOutcome]) -> dict[str, Catalog]:
    return {
        catalog_id: outcome.catalog
        for catalog_id, outcome in outcomes.items()
        if outcome.ok
    }


def _record(operation: str, start: float, outcomes: Mapping[str, LoadOutcome]) -> None:
    record_query(
        operation=operation,
        duration_ms=(perf_counter() - start) * 1000,
        result_count=sum(1 for outcome in outcomes.values() if outcome.ok),
    )
