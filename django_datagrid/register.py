from __future__ import annotations

import logging
from importlib import import_module

from .conf import settings
from .registry import DataGridRegistry, datagrid_registry

log = logging.getLogger(__name__)


def load_datagrids(registry: DataGridRegistry | None = None) -> None:
    """Register query handlers and datagrids declared in settings.

    ``DATAGRID_REGISTRARS`` entries are either a module path, imported for its
    side effects, or ``"module:callable"``, called with the registry.
    """
    registry = registry or datagrid_registry
    query_handlers = registry.query_handler_registry

    for code, configuration in settings.DATAGRID_QUERY_HANDLERS.items():
        query_handlers.add_raw_query_handler_configuration(code, configuration)
    for code, configuration in settings.DATAGRIDS.items():
        registry.add_raw_datagrid_configuration(code, configuration)

    for entry in settings.DATAGRID_REGISTRARS:
        try:
            module_path, callable_name = entry.split(":", 1)
        except ValueError:
            import_module(entry)
        else:
            module = import_module(module_path)
            registrar = getattr(module, callable_name)
            registrar(registry)

    log.info(
        "Loaded %d datagrid(s) and %d query handler(s)",
        len(registry.codes()),
        len(query_handlers.codes()),
    )
