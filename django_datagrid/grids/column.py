from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional

from django.db import models

from django_datagrid.exceptions import ConfigurationError
from django_datagrid.utils import split_path

__all__ = ["Column"]


class Column:
    """A cell-rendering descriptor owned by a :class:`DataGrid`.

    ``property_path`` (default: the key) locates the value on each result,
    ``sort_column`` (default: the key) is the name the query handler sorts on.
    Columns are read-only once created.
    """

    OPTION_KEYS = ("label", "template", "sort_column", "property_path", "formatting_options")

    def __init__(self, key: str, datagrid, options: Optional[Mapping[str, Any]] = None):
        options = dict(options or {})
        unknown = [k for k in options.keys() if k not in self.OPTION_KEYS]
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) for column '{key}' of datagrid '{datagrid.code}': "
                f"{', '.join(map(str, unknown))}"
            )
        formatting_options = options.get("formatting_options") or {}
        if not isinstance(formatting_options, Mapping):
            raise ConfigurationError(f"Column '{key}': formatting_options must be a mapping")

        self._key = key
        self._datagrid = datagrid
        self._options = options
        self._label = options.get("label")
        self._template = options.get("template")
        self._sort_column = options.get("sort_column") or key
        self._property_path = options.get("property_path") or key
        self._formatting_options: Dict[str, Any] = dict(formatting_options)

    def __repr__(self) -> str:
        return f"<Column {self._key!r} of {self._datagrid.code!r}>"

    @property
    def key(self) -> str:
        return self._key

    @property
    def datagrid(self):
        return self._datagrid

    @property
    def label(self):
        return self._label

    @property
    def template(self) -> Optional[str]:
        return self._template

    @property
    def sort_column(self) -> str:
        return self._sort_column

    @property
    def property_path(self) -> str:
        return self._property_path

    @property
    def formatting_options(self) -> Dict[str, Any]:
        return dict(self._formatting_options)

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self._options)

    @property
    def sortable(self) -> bool:
        configuration = self._datagrid.query_handler.get_configuration()
        return self._sort_column in (getattr(configuration, "sortable", None) or ())

    def get_value(self, obj: Any) -> Any:
        """Walk ``property_path`` on ``obj``; missing steps yield ``None``."""
        value = obj
        for part in split_path(self._property_path):
            if value is None:
                return None
            if isinstance(value, Mapping):
                value = value.get(part)
            else:
                value = getattr(value, part, None)
            if callable(value) and not isinstance(value, models.Manager):
                value = value()
        return value

    def render_value(self, obj: Any, options: Optional[Mapping[str, Any]] = None) -> str:
        renderer = self._datagrid.column_value_renderer
        return renderer.render_value(self.get_value(obj), column=self, options=options)

    def render_label(self) -> str:
        return self._datagrid.column_label_renderer.render_column_label(self)

    def bind(self, datagrid) -> "Column":
        """Copy of this column owned by ``datagrid``."""
        column = copy.copy(self)
        column._datagrid = datagrid
        return column
