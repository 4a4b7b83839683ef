from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Mapping

from django_datagrid.exceptions import MissingQueryHandlerError, MissingQueryHandlerFactoryError

from .base import QueryHandler, QueryHandlerConfiguration
from .model import ModelQueryHandler

log = logging.getLogger(__name__)

__all__ = ["QueryHandlerRegistry", "query_handler_registry"]

QueryHandlerFactory = Callable[[QueryHandlerConfiguration], QueryHandler]


class QueryHandlerRegistry:
    """Query handlers by code, built lazily from raw configurations.

    The ``provider`` entry of a configuration selects the factory used to
    build its handler (``model`` by default).
    """

    def __init__(self, factories: Mapping[str, QueryHandlerFactory] | None = None):
        self._factories: Dict[str, QueryHandlerFactory] = dict(
            factories if factories is not None else {"model": ModelQueryHandler}
        )
        self._configurations: Dict[str, Dict[str, Any]] = {}
        self._handlers: Dict[str, QueryHandler] = {}
        self._lock = threading.RLock()

    def add_query_handler_factory(self, provider: str, factory: QueryHandlerFactory) -> None:
        self._factories[provider] = factory

    def add_raw_query_handler_configuration(self, code: str, configuration: Mapping[str, Any]) -> None:
        with self._lock:
            self._configurations[code] = dict(configuration)
            # A new configuration supersedes a handler built from an older one.
            self._handlers.pop(code, None)

    def add_query_handler(self, handler: QueryHandler) -> None:
        with self._lock:
            code = handler.get_configuration().code
            self._handlers[code] = handler
            self._configurations.pop(code, None)

    def has_query_handler(self, code: str) -> bool:
        return code in self._handlers or code in self._configurations

    def get_query_handler(self, code: str) -> QueryHandler:
        with self._lock:
            if code in self._handlers:
                return self._handlers[code]
            return self._build_query_handler(code)

    def codes(self) -> list[str]:
        return sorted(set(self._handlers) | set(self._configurations))

    def _build_query_handler(self, code: str) -> QueryHandler:
        if code not in self._configurations:
            raise MissingQueryHandlerError(f"No query handler with code: {code}")
        configuration = QueryHandlerConfiguration.from_mapping(code, self._configurations[code])
        factory = self._factories.get(configuration.provider)
        if factory is None:
            raise MissingQueryHandlerFactoryError(
                f"No query handler factory for provider '{configuration.provider}' (query handler '{code}')"
            )
        handler = factory(configuration)
        self._handlers[code] = handler
        del self._configurations[code]
        log.debug("Built query handler '%s' (provider=%s)", code, configuration.provider)
        return handler


query_handler_registry = QueryHandlerRegistry()
