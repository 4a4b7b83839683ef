from .base import FILTER_TYPES, Filter, QueryHandler, QueryHandlerConfiguration
from .model import ModelQueryHandler
from .registry import QueryHandlerRegistry, query_handler_registry

__all__ = [
    "FILTER_TYPES",
    "Filter",
    "QueryHandler",
    "QueryHandlerConfiguration",
    "ModelQueryHandler",
    "QueryHandlerRegistry",
    "query_handler_registry",
]
