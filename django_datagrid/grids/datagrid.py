"""The datagrid model: columns, actions, buttons and the filter form."""
from __future__ import annotations

import copy
import logging
import threading
from typing import Any, Dict, List, Mapping, Optional

from django.utils.translation import gettext_lazy as _

from django_datagrid.conf import settings
from django_datagrid.exceptions import ActionNotFound, ConfigurationError, FormNotBuilt
from django_datagrid.forms.builder import GridForm
from django_datagrid.forms.fields import LinkField, SubmitButtonField
from django_datagrid.utils import humanize

from .column import Column
from .options import DataGridOptions, merge_control_options, resolve_renderer

log = logging.getLogger(__name__)

__all__ = ["DataGrid"]

SUBMIT_BUTTON = "submit_button"
RESET_BUTTON = "reset_button"


class DataGrid:
    """A configured list view bound to a query handler and a set of actions.

    ``configuration`` must hold a ``columns`` mapping (column key to column
    options, in display order) and a ``query_handler``; every other entry must
    be one of the :class:`~django_datagrid.grids.options.DataGridOptions`
    fields.
    """

    def __init__(self, code: str, configuration: Mapping[str, Any]):
        configuration = dict(configuration)
        try:
            columns = configuration.pop("columns")
        except KeyError:
            raise ConfigurationError(f"Datagrid '{code}' requires a 'columns' entry") from None
        if not isinstance(columns, Mapping):
            raise ConfigurationError(f"'columns' of datagrid '{code}' must be a mapping")

        options = DataGridOptions.from_mapping(code, configuration)

        self._code = code
        self._lock = threading.RLock()
        self._form = None
        self._form_view = None
        self._columns: List[Column] = []

        self.query_handler = options.query_handler
        self.template: str = options.template or settings.DATAGRID_DEFAULT_TEMPLATE
        self.template_vars: Dict[str, Any] = options.template_vars
        self.form_options: Dict[str, Any] = options.form_options
        self.form_theme: Optional[str] = options.form_theme or settings.DATAGRID_DEFAULT_FORM_THEME
        self.actions: Dict[str, Dict[str, Any]] = options.actions
        self.submit_button: Dict[str, Any] = options.submit_button
        self.reset_button: Dict[str, Any] = options.reset_button
        self.column_value_renderer = resolve_renderer(
            options.column_value_renderer, settings.DATAGRID_COLUMN_VALUE_RENDERER
        )
        self.column_label_renderer = resolve_renderer(
            options.column_label_renderer, settings.DATAGRID_COLUMN_LABEL_RENDERER
        )

        for key, column_configuration in columns.items():
            self._create_column(key, column_configuration)

    def __repr__(self) -> str:
        return f"<DataGrid {self._code!r}>"

    @property
    def code(self) -> str:
        return self._code

    # Columns

    @property
    def columns(self) -> List[Column]:
        return list(self._columns)

    def add_column(self, column: Column, index: Optional[int] = None) -> None:
        if index is None:
            self._columns.append(column)
        else:
            self._columns.insert(index, column)

    def set_columns(self, columns) -> None:
        self._columns = list(columns)

    def _create_column(self, key: str, options: Optional[Mapping[str, Any]]) -> None:
        self._columns.append(Column(key, self, options))

    # Actions

    def has_action(self, action: str) -> bool:
        return action in self.actions

    def get_action(self, action: str) -> Dict[str, Any]:
        if not self.has_action(action):
            raise ActionNotFound(f"No action with code: '{action}'")
        return self.actions[action]

    def set_action(self, action: str, configuration: Mapping[str, Any]) -> None:
        self.actions[action] = dict(configuration)

    def set_actions(self, actions: Mapping[str, Mapping[str, Any]]) -> None:
        self.actions = {code: dict(options or {}) for code, options in actions.items()}

    def set_action_parameters(self, action: str, parameters: Mapping[str, Any]) -> None:
        """Set the ``route_parameters`` of an action or of a filter button."""
        parameters = dict(parameters)
        if action == SUBMIT_BUTTON:
            self.submit_button = {**self.submit_button, "route_parameters": parameters}
            return
        if action == RESET_BUTTON:
            self.reset_button = {**self.reset_button, "route_parameters": parameters}
            return
        self.set_action(action, {**self.get_action(action), "route_parameters": parameters})

    # Form

    def build_form(self, builder):
        """Declare buttons and actions on ``builder``, then let the query handler build the form.

        Rebuilds on every call; the cached form view is dropped.
        """
        with self._lock:
            self._build_filter_actions(builder)
            self._build_datagrid_actions(builder)
            form = self.query_handler.build_form(builder)
            if self.form_theme and hasattr(form, "set_template_pack"):
                form.set_template_pack(self.form_theme)
            self._form = form
            self._form_view = None
            return form

    def get_form(self):
        if self._form is None:
            raise FormNotBuilt("You must first call build_form()")
        return self._form

    def get_form_view(self):
        with self._lock:
            if self._form_view is None:
                self._form_view = self.get_form().create_view()
            return self._form_view

    def _build_filter_actions(self, builder) -> None:
        filters = self.query_handler.get_configuration().get_filters()
        if any(not flt.is_hidden() for flt in filters):
            self._build_reset_action(builder)
            self._build_submit_action(builder)

    def _build_reset_action(self, builder) -> None:
        defaults = {
            "form_type": LinkField,
            "label": _("Reset"),
            "uri": builder.get_option("action") or "?",
        }
        control = merge_control_options(defaults, self.reset_button)
        builder.add("filter_reset_button", control.form_type, control.options)

    def _build_submit_action(self, builder) -> None:
        defaults = {
            "form_type": SubmitButtonField,
            "label": _("Filter"),
            "attr": {"class": "btn-primary"},
        }
        control = merge_control_options(defaults, self.submit_button)
        builder.add("filter_submit_button", control.form_type, control.options)

    def _build_datagrid_actions(self, builder) -> None:
        actions_builder = builder.create("actions", GridForm, {"label": False})
        for code, options in self.actions.items():
            control = merge_control_options({"form_type": LinkField, "label": humanize(code)}, options)
            actions_builder.add(code, control.form_type, control.options)
        builder.add(actions_builder)

    # Query handler delegation

    def handle_request(self, request) -> None:
        self.query_handler.handle_request(request)

    def handle_array(self, data: Mapping[str, Any]) -> None:
        self.query_handler.handle_array(data)

    def get_pager(self):
        return self.query_handler.get_pager()

    def clone(self) -> "DataGrid":
        """Copy sharing configuration and renderers but no request state."""
        clone = copy.copy(self)
        clone._lock = threading.RLock()
        clone._form = None
        clone._form_view = None
        clone.query_handler = self.query_handler.clone()
        clone.template_vars = copy.deepcopy(self.template_vars)
        clone.form_options = copy.deepcopy(self.form_options)
        clone.actions = copy.deepcopy(self.actions)
        clone.submit_button = copy.deepcopy(self.submit_button)
        clone.reset_button = copy.deepcopy(self.reset_button)
        clone._columns = [column.bind(clone) for column in self._columns]
        log.debug("Cloned datagrid '%s'", self._code)
        return clone
