"""Default renderers for column values and column labels."""
from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from django.contrib.admin.utils import label_for_field
from django.core.exceptions import FieldDoesNotExist
from django.db import models
from django.utils import timezone
from django.utils.formats import date_format, number_format, time_format
from django.utils.text import capfirst
from django.utils.translation import gettext

from .utils import field_verbose_name, humanize

__all__ = ["ColumnValueRenderer", "ColumnLabelRenderer"]


class ColumnValueRenderer:
    """Turns a raw cell value into display text.

    Formatting options come from the column's ``formatting_options`` and can
    be overridden per call: ``date_format``, ``datetime_format``,
    ``time_format`` (Django format names or format strings), ``decimals`` and
    ``separator`` for iterables.
    """

    def render_value(self, value: Any, column=None, options: Optional[Mapping[str, Any]] = None) -> str:
        opts = dict(getattr(column, "formatting_options", None) or {})
        opts.update(options or {})

        if value is None:
            return ""
        if isinstance(value, bool):
            return gettext("Yes") if value else gettext("No")
        if isinstance(value, datetime.datetime):
            if timezone.is_aware(value):
                value = timezone.localtime(value)
            return date_format(value, opts.get("datetime_format", "DATETIME_FORMAT"))
        if isinstance(value, datetime.date):
            return date_format(value, opts.get("date_format", "DATE_FORMAT"))
        if isinstance(value, datetime.time):
            return time_format(value, opts.get("time_format", "TIME_FORMAT"))
        if isinstance(value, (int, float, Decimal)):
            return number_format(value, decimal_pos=opts.get("decimals"))
        if isinstance(value, models.Manager):
            value = value.all()
        if isinstance(value, (list, tuple, set, frozenset, models.QuerySet)):
            separator = opts.get("separator", ", ")
            return separator.join(self.render_value(item, column, options) for item in value)
        return str(value)


class ColumnLabelRenderer:
    """Header text: explicit label, model field verbose name, or humanized key."""

    def render_column_label(self, column) -> str:
        if column.label:
            return str(column.label)
        model = getattr(column.datagrid.query_handler, "model", None)
        label = self._model_label(model, column.property_path)
        return str(label) if label else humanize(column.key)

    @staticmethod
    def _model_label(model, path: str) -> Optional[str]:
        if model is None:
            return None
        if "__" in path or "." in path:
            return field_verbose_name(model, path)
        try:
            return capfirst(label_for_field(path, model, return_attr=False))
        except (AttributeError, FieldDoesNotExist):
            return None
