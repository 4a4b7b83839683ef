from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from django import forms
from django.apps import apps
from django.core.exceptions import FieldDoesNotExist
from django.core.paginator import Paginator
from django.db.models import Q

from django_datagrid.exceptions import ConfigurationError
from django_datagrid.utils import field_verbose_name, humanize

from .base import Filter, QueryHandler, QueryHandlerConfiguration

log = logging.getLogger(__name__)

__all__ = ["ModelQueryHandler"]

FILTER_FIELDS = {
    "text": forms.CharField,
    "choice": forms.ChoiceField,
    "exact": forms.CharField,
    "boolean": forms.NullBooleanField,
    "number": forms.DecimalField,
    "date": forms.DateField,
}

DEFAULT_LOOKUPS = {
    "text": "icontains",
    "choice": "exact",
    "exact": "exact",
    "boolean": "exact",
    "number": "exact",
    "date": "exact",
}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, tuple)) and not value)


class ModelQueryHandler(QueryHandler):
    """Query handler backed by a Django model's default manager.

    Filter values come from a ``filters`` child form, sorting from the
    ``sort``/``direction`` keys and the page number from ``page``.
    """

    filters_form_name = "filters"
    sort_key = "sort"
    direction_key = "direction"
    page_key = "page"

    def __init__(self, configuration: QueryHandlerConfiguration):
        super().__init__(configuration)
        if not configuration.model:
            raise ConfigurationError(f"Query handler '{configuration.code}' requires a 'model'")
        try:
            self.model = apps.get_model(configuration.model)
        except (LookupError, ValueError) as e:
            raise ConfigurationError(
                f"Unknown model '{configuration.model}' for query handler '{configuration.code}'"
            ) from e

    def get_queryset(self):
        return self.model._default_manager.all()

    # Form

    def get_filter_control(self, flt: Filter) -> Tuple[Any, Dict[str, Any]]:
        """Field class and options for one filter."""
        options: Dict[str, Any] = {
            "label": flt.label or field_verbose_name(self.model, flt.attributes[0]) or humanize(flt.code),
            "required": False,
        }
        if flt.filter_type == "choice":
            choices = flt.get_option("choices")
            if choices is None:
                choices = self._model_choices(flt.attributes[0])
            options["choices"] = [("", "---------")] + list(choices)
        if flt.get_option("default") is not None:
            options["initial"] = flt.get_option("default")
        if flt.is_hidden():
            options["widget"] = forms.HiddenInput
        options.update(flt.form_options)
        return flt.form_type or FILTER_FIELDS[flt.filter_type], options

    def _model_choices(self, path: str):
        try:
            model_field = self.model._meta.get_field(path)
        except FieldDoesNotExist:
            return []
        return list(getattr(model_field, "flatchoices", None) or [])

    def build_form(self, builder):
        filters_builder = builder.create(self.filters_form_name, options={"label": False})
        for flt in self.configuration.get_filters():
            control_type, options = self.get_filter_control(flt)
            filters_builder.add(flt.code, control_type, options)
        builder.add(filters_builder)
        self._form = builder.get_form()
        if self._data:
            self._form.bind(self._data)
        return self._form

    # Request binding

    def handle_array(self, data: Mapping[str, Any]) -> None:
        self._data = data if data is not None else {}
        if self._form is not None:
            self._form.bind(self._data)

    def _filters_submitted(self) -> bool:
        prefix = f"{self.filters_form_name}-"
        return any(str(key).startswith(prefix) for key in self._data)

    def get_filter_values(self) -> Dict[str, Any]:
        """Filter values to apply: submitted ones, or the configured defaults."""
        defaults = {
            flt.code: flt.get_option("default")
            for flt in self.configuration.get_filters()
            if flt.get_option("default") is not None
        }
        if self._form is None or not self._filters_submitted():
            return defaults
        filters_form = self._form.get_child(self.filters_form_name)
        if not filters_form.is_valid():
            log.debug("Invalid filters for '%s': %s", self.configuration.code, filters_form.errors.as_json())
        cleaned = getattr(filters_form, "cleaned_data", {}) or {}
        return {code: value for code, value in cleaned.items() if not _is_empty(value)}

    # Results

    def apply_filter(self, qs, flt: Filter, value: Any):
        lookup = flt.get_option("lookup") or DEFAULT_LOOKUPS[flt.filter_type]
        if isinstance(value, (list, tuple)) and lookup == "exact":
            lookup = "in"
        condition = Q()
        for attribute in flt.attributes:
            condition |= Q(**{f"{attribute}__{lookup}": value})
        return qs.filter(condition)

    def get_sort(self) -> Optional[Tuple[str, str]]:
        column = self._data.get(self.sort_key) if self._data else None
        if column and column in self.configuration.sortable:
            direction = str(self._data.get(self.direction_key) or "asc").lower()
            return column, "desc" if direction == "desc" else "asc"
        return None

    def apply_sort(self, qs):
        sort = self.get_sort()
        ordering = [sort] if sort else list(self.configuration.default_sort)
        if ordering:
            qs = qs.order_by(*[f"-{attr}" if direction == "desc" else attr for attr, direction in ordering])
        if not qs.ordered:
            qs = qs.order_by("pk")
        return qs

    def get_results(self):
        qs = self.get_queryset()
        for code, value in self.get_filter_values().items():
            if not self.configuration.has_filter(code):
                continue
            qs = self.apply_filter(qs, self.configuration.get_filter(code), value)
        return self.apply_sort(qs)

    def get_page_number(self):
        return (self._data.get(self.page_key) if self._data else None) or 1

    def get_pager(self):
        paginator = Paginator(self.get_results(), self.configuration.results_per_page)
        return paginator.page(self.get_page_number())
