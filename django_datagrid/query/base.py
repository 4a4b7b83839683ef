"""Query handler contract consumed by datagrids.

A query handler owns the filter definitions, the form binding and the
pagination of one result set. :class:`QueryHandlerConfiguration` and
:class:`Filter` are the validated forms of the raw mappings declared in
settings or passed to :class:`~django_datagrid.query.registry.QueryHandlerRegistry`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from django_datagrid.conf import settings
from django_datagrid.exceptions import ConfigurationError, FormNotBuilt, MissingFilterError

__all__ = ["FILTER_TYPES", "Filter", "QueryHandlerConfiguration", "QueryHandler"]

FILTER_TYPES = {"text", "choice", "exact", "boolean", "number", "date"}
SORT_DIRECTIONS = {"asc", "desc"}


def _check_keys(kind: str, code: str, mapping: Mapping[str, Any], allowed) -> None:
    unknown = [k for k in mapping.keys() if k not in allowed]
    if unknown:
        raise ConfigurationError(f"Unknown {kind} option(s) for '{code}': {', '.join(map(str, unknown))}")


@dataclass
class Filter:
    code: str
    filter_type: str = "text"
    label: Optional[str] = None
    attributes: List[str] = field(default_factory=list)
    form_type: Any = None
    form_options: Dict[str, Any] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    ALLOWED_KEYS = ("type", "label", "attributes", "form_type", "form_options", "options", "default")

    def __post_init__(self):
        if self.filter_type not in FILTER_TYPES:
            raise ConfigurationError(f"Invalid filter type '{self.filter_type}' for filter '{self.code}'")
        if not self.attributes:
            self.attributes = [self.code]

    @classmethod
    def from_mapping(cls, code: str, mapping: Optional[Mapping[str, Any]]) -> "Filter":
        mapping = dict(mapping or {})
        _check_keys("filter", code, mapping, cls.ALLOWED_KEYS)
        options = dict(mapping.get("options") or {})
        if "default" in mapping:
            options["default"] = mapping["default"]
        attributes = mapping.get("attributes") or []
        if isinstance(attributes, str):
            attributes = [attributes]
        return cls(
            code=code,
            filter_type=mapping.get("type", "text"),
            label=mapping.get("label"),
            attributes=list(attributes),
            form_type=mapping.get("form_type"),
            form_options=dict(mapping.get("form_options") or {}),
            options=options,
        )

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def is_hidden(self) -> bool:
        return bool(self.options.get("hidden"))


@dataclass
class QueryHandlerConfiguration:
    code: str
    provider: str = "model"
    model: Optional[str] = None
    filters: Dict[str, Filter] = field(default_factory=dict)
    sortable: List[str] = field(default_factory=list)
    default_sort: List[Tuple[str, str]] = field(default_factory=list)
    results_per_page: int = 0
    options: Dict[str, Any] = field(default_factory=dict)

    ALLOWED_KEYS = ("provider", "model", "filters", "sortable", "default_sort", "results_per_page", "options")

    def __post_init__(self):
        if not self.results_per_page:
            self.results_per_page = settings.DATAGRID_RESULTS_PER_PAGE
        if not isinstance(self.results_per_page, int) or self.results_per_page < 1:
            raise ConfigurationError(f"results_per_page must be a positive integer for '{self.code}'")
        for attribute, direction in self.default_sort:
            if direction not in SORT_DIRECTIONS:
                raise ConfigurationError(
                    f"Invalid sort direction '{direction}' for '{attribute}' in '{self.code}'"
                )

    @classmethod
    def from_mapping(cls, code: str, mapping: Mapping[str, Any]) -> "QueryHandlerConfiguration":
        if not isinstance(mapping, Mapping):
            raise ConfigurationError(f"Query handler configuration for '{code}' must be a mapping")
        _check_keys("query handler", code, mapping, cls.ALLOWED_KEYS)
        filters = {
            filter_code: Filter.from_mapping(filter_code, filter_config)
            for filter_code, filter_config in (mapping.get("filters") or {}).items()
        }
        default_sort = mapping.get("default_sort") or {}
        if isinstance(default_sort, Mapping):
            default_sort = list(default_sort.items())
        return cls(
            code=code,
            provider=mapping.get("provider", "model"),
            model=mapping.get("model"),
            filters=filters,
            sortable=list(mapping.get("sortable") or []),
            default_sort=[(str(a), str(d).lower()) for a, d in default_sort],
            results_per_page=mapping.get("results_per_page") or 0,
            options=dict(mapping.get("options") or {}),
        )

    def get_filters(self) -> Sequence[Filter]:
        return list(self.filters.values())

    def has_filter(self, code: str) -> bool:
        return code in self.filters

    def get_filter(self, code: str) -> Filter:
        if code not in self.filters:
            raise MissingFilterError(f"No filter with code '{code}' in query handler '{self.code}'")
        return self.filters[code]


class QueryHandler(ABC):
    """Owns filters, form binding and pagination for one result set."""

    def __init__(self, configuration: QueryHandlerConfiguration):
        self.configuration = configuration
        self._form = None
        self._data: Mapping[str, Any] = {}

    def get_configuration(self) -> QueryHandlerConfiguration:
        return self.configuration

    def get_form(self):
        if self._form is None:
            raise FormNotBuilt(f"Query handler '{self.configuration.code}': call build_form() first")
        return self._form

    @abstractmethod
    def build_form(self, builder):
        """Add the filter controls to ``builder`` and return the built form."""

    def handle_request(self, request) -> None:
        method = getattr(self._form, "method", "get")
        self.handle_array(request.POST if method == "post" else request.GET)

    @abstractmethod
    def handle_array(self, data: Mapping[str, Any]) -> None:
        """Bind a plain mapping (or ``QueryDict``) to the filter state."""

    @abstractmethod
    def get_pager(self):
        """Return the current page of results."""

    def get_sort(self) -> Optional[Tuple[str, str]]:
        return None

    def clone(self) -> "QueryHandler":
        return type(self)(self.configuration)
