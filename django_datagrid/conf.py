"""Datagrid settings, read from Django settings with package defaults."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from django.conf import settings as django_settings

__all__ = ["settings", "DataGridSettings"]


@dataclass
class DataGridSettings:
    """``DATAGRID*`` settings; a name missing from Django settings falls back to ``defaults``.

    Lookups happen on every access, so ``override_settings`` is honoured.
    """

    defaults: dict[str, Any]

    def __getattr__(self, attr: str) -> Any:
        if attr in self.defaults:
            return getattr(django_settings, attr, self.defaults[attr])
        return getattr(django_settings, attr)


settings = DataGridSettings(
    defaults={
        "DATAGRIDS": {},
        "DATAGRID_QUERY_HANDLERS": {},
        "DATAGRID_REGISTRARS": [],
        "DATAGRID_DEFAULT_TEMPLATE": "django_datagrid/datagrid.html",
        "DATAGRID_DEFAULT_FORM_THEME": None,
        "DATAGRID_COLUMN_VALUE_RENDERER": "django_datagrid.renderers.ColumnValueRenderer",
        "DATAGRID_COLUMN_LABEL_RENDERER": "django_datagrid.renderers.ColumnLabelRenderer",
        "DATAGRID_RESULTS_PER_PAGE": 15,
    }
)
