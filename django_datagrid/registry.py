from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .exceptions import ConfigurationError, DataGridNotFound
from .grids.datagrid import DataGrid
from .query.base import QueryHandler
from .query.registry import QueryHandlerRegistry, query_handler_registry

log = logging.getLogger(__name__)

__all__ = ["QUERY_HANDLER_PREFIX", "DataGridRegistry", "datagrid_registry"]

# Query handlers declared inline in a datagrid configuration are registered
# under this prefix followed by the datagrid code.
QUERY_HANDLER_PREFIX = "__sidus_datagrid."


@dataclass(frozen=True)
class Pending:
    configuration: Dict[str, Any]


@dataclass(frozen=True)
class Built:
    datagrid: DataGrid


class DataGridRegistry:
    """Datagrids by code, built from raw configuration on first access.

    Each code maps to either a :class:`Pending` configuration or a
    :class:`Built` datagrid. The pending to built promotion happens under a
    lock, so concurrent first lookups build a single instance.
    """

    def __init__(self, query_handler_registry: Optional[QueryHandlerRegistry] = None):
        self.query_handler_registry = query_handler_registry or QueryHandlerRegistry()
        self._entries: Dict[str, Union[Pending, Built]] = {}
        self._lock = threading.RLock()

    def add_raw_datagrid_configuration(self, code: str, configuration: Mapping[str, Any]) -> None:
        with self._lock:
            entry = self._entries.get(code)
            if isinstance(entry, Built):
                log.warning("Datagrid '%s' is already built, ignoring new configuration", code)
                return
            if entry is not None:
                log.debug("Replacing pending datagrid configuration '%s'", code)
            self._entries[code] = Pending(dict(configuration))

    def add_datagrid(self, datagrid: DataGrid) -> None:
        with self._lock:
            self._entries[datagrid.code] = Built(datagrid)

    def has_datagrid(self, code: str) -> bool:
        return code in self._entries

    def get_datagrid(self, code: str) -> DataGrid:
        entry = self._entries.get(code)
        if isinstance(entry, Built):
            return entry.datagrid
        with self._lock:
            entry = self._entries.get(code)
            if entry is None:
                raise DataGridNotFound(f"No data-grid with code : {code}")
            if isinstance(entry, Built):
                return entry.datagrid
            try:
                datagrid = self._build_datagrid(code, entry.configuration)
            except Exception:
                log.exception("Failed to build datagrid '%s'", code)
                raise
            self._entries[code] = Built(datagrid)
            log.info("Built datagrid '%s'", code)
            return datagrid

    def codes(self) -> list[str]:
        return sorted(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _build_datagrid(self, code: str, configuration: Mapping[str, Any]) -> DataGrid:
        configuration = dict(configuration)
        configuration["query_handler"] = self._resolve_query_handler(code, configuration.get("query_handler"))
        return DataGrid(code, configuration)

    def _resolve_query_handler(self, code: str, query_handler: Any) -> QueryHandler:
        if isinstance(query_handler, QueryHandler):
            return query_handler
        if isinstance(query_handler, str):
            return self.query_handler_registry.get_query_handler(query_handler)
        if isinstance(query_handler, Mapping):
            key = QUERY_HANDLER_PREFIX + code
            self.query_handler_registry.add_raw_query_handler_configuration(key, query_handler)
            return self.query_handler_registry.get_query_handler(key)
        raise ConfigurationError(f"Datagrid '{code}' requires a 'query_handler' entry")


datagrid_registry = DataGridRegistry(query_handler_registry)
