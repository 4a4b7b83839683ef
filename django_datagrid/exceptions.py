"""Exceptions raised by the datagrid layer."""
from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured
from django.http import Http404

__all__ = [
    "DataGridError",
    "ConfigurationError",
    "DataGridNotFound",
    "ActionNotFound",
    "FormNotBuilt",
    "MissingQueryHandlerError",
    "MissingQueryHandlerFactoryError",
    "MissingFilterError",
]


class DataGridError(Exception):
    """Base class for every error raised by ``django_datagrid``."""


class ConfigurationError(DataGridError, ImproperlyConfigured):
    """A configuration mapping contains an unknown or ill-typed entry."""


class DataGridNotFound(DataGridError, Http404):
    """No datagrid is registered, built or pending, under the given code."""


class ActionNotFound(DataGridError, LookupError):
    pass


class FormNotBuilt(DataGridError, RuntimeError):
    """The form was accessed before ``DataGrid.build_form()`` ran."""


class MissingQueryHandlerError(DataGridError, LookupError):
    pass


class MissingQueryHandlerFactoryError(DataGridError, LookupError):
    pass


class MissingFilterError(DataGridError, LookupError):
    pass
