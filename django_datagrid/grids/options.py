from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from django.utils.module_loading import import_string

from django_datagrid.exceptions import ConfigurationError
from django_datagrid.utils import deep_merge

__all__ = ["DataGridOptions", "ControlOptions", "merge_control_options", "resolve_renderer"]

MAPPING_OPTIONS = ("template_vars", "form_options", "actions", "submit_button", "reset_button")
STRING_OPTIONS = ("template", "form_theme")


def resolve_renderer(value: Any, default: Any) -> Any:
    """Renderer instance from an instance, a class or a dotted path."""
    if value is None:
        value = default
    if isinstance(value, str):
        value = import_string(value)
    if isinstance(value, type):
        value = value()
    return value


@dataclass
class DataGridOptions:
    """Validated datagrid configuration, minus the columns."""

    query_handler: Any = None
    template: Optional[str] = None
    template_vars: Dict[str, Any] = field(default_factory=dict)
    form_options: Dict[str, Any] = field(default_factory=dict)
    actions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    submit_button: Dict[str, Any] = field(default_factory=dict)
    reset_button: Dict[str, Any] = field(default_factory=dict)
    form_theme: Optional[str] = None
    column_value_renderer: Any = None
    column_label_renderer: Any = None

    @classmethod
    def from_mapping(cls, code: str, mapping: Mapping[str, Any]) -> "DataGridOptions":
        known = {f.name for f in fields(cls)}
        unknown = [k for k in mapping.keys() if k not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown option(s) for datagrid '{code}': {', '.join(map(str, unknown))}"
            )
        values = dict(mapping)
        if values.get("query_handler") is None:
            raise ConfigurationError(f"Datagrid '{code}' requires a 'query_handler'")
        for name in MAPPING_OPTIONS:
            value = values.get(name)
            if value is None:
                values.pop(name, None)
                continue
            if not isinstance(value, Mapping):
                raise ConfigurationError(f"Option '{name}' of datagrid '{code}' must be a mapping")
            values[name] = dict(value)
        for name in STRING_OPTIONS:
            value = values.get(name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"Option '{name}' of datagrid '{code}' must be a string")
        actions = {}
        for action, action_options in values.get("actions", {}).items():
            if action_options is not None and not isinstance(action_options, Mapping):
                raise ConfigurationError(f"Action '{action}' of datagrid '{code}' must be a mapping")
            actions[action] = dict(action_options or {})
        values["actions"] = actions
        return cls(**values)


@dataclass(frozen=True)
class ControlOptions:
    """Control type plus the options handed to its constructor."""

    form_type: Any
    options: Dict[str, Any]


def merge_control_options(defaults: Mapping[str, Any], overrides: Optional[Mapping[str, Any]]) -> ControlOptions:
    """Deep-merge ``overrides`` over ``defaults`` and split off ``form_type``.

    User values win. An empty ``form_type`` in ``overrides`` keeps the default.
    """
    merged = deep_merge(defaults, overrides or {})
    form_type = merged.pop("form_type", None) or defaults.get("form_type")
    if form_type is None:
        raise ConfigurationError("Control options require a 'form_type'")
    return ControlOptions(form_type=form_type, options=merged)
