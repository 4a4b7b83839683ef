from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from crispy_forms.helper import FormHelper
from django import forms
from django.utils.datastructures import MultiValueDict
from django.utils.module_loading import import_string

from .view import FormView

__all__ = ["GridForm", "FormBuilder", "build_field"]

# Options consumed by GridForm itself; anything else stays readable on the builder.
FORM_OPTION_KEYS = ("label", "action", "method", "attr", "initial")


def _resolve_class(control_type):
    if isinstance(control_type, str):
        return import_string(control_type)
    return control_type


def build_field(control_type, options: Optional[Mapping[str, Any]] = None) -> forms.Field:
    """Instantiate a form field from a control type and its options.

    ``control_type`` is a field class or a dotted path to one. The ``attr``
    option is moved onto the widget attributes, everything else is passed to
    the field constructor.
    """
    field_class = _resolve_class(control_type) or forms.CharField
    kwargs = dict(options or {})
    attrs = kwargs.pop("attr", None) or {}
    field = field_class(**kwargs)
    if attrs:
        field.widget.attrs.update(attrs)
    return field


class GridForm(forms.Form):
    """Form node of a datagrid form tree.

    Child forms share the parent's data and are prefixed with their name, so
    a ``filters`` child reads ``filters-<field>`` keys.
    """

    def __init__(self, *args, name="", label=None, action=None, method="get", attr=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.name = name
        self.label = label
        self.action = action
        self.method = (method or "get").lower()
        self.attrs = dict(attr or {})
        self.children: Dict[str, GridForm] = {}

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.disable_csrf = True
        self.helper.form_method = self.method

    def add_child(self, form: "GridForm") -> None:
        self.children[form.name] = form

    def get_child(self, name: str) -> "GridForm":
        try:
            return self.children[name]
        except KeyError:
            raise KeyError(f"Form '{self.name}' has no child '{name}'") from None

    def bind(self, data) -> None:
        """(Re)bind ``data`` to this form and its children."""
        self.data = MultiValueDict() if data is None else data
        self.is_bound = data is not None
        self._errors = None
        self._bound_fields_cache = {}
        if hasattr(self, "cleaned_data"):
            del self.cleaned_data
        for child in self.children.values():
            child.bind(data)

    def is_valid(self) -> bool:
        valid = super().is_valid()
        return all([valid] + [child.is_valid() for child in self.children.values()])

    def set_template_pack(self, template_pack: str) -> None:
        self.helper.template_pack = template_pack
        for child in self.children.values():
            child.set_template_pack(template_pack)

    def create_view(self) -> FormView:
        return FormView(self)


class FormBuilder:
    """Collects control declarations and produces a :class:`GridForm` tree."""

    def __init__(self, name: str = "", form_class=None, options: Optional[Mapping[str, Any]] = None):
        self.name = name
        self.form_class = _resolve_class(form_class) or GridForm
        self.options: Dict[str, Any] = dict(options or {})
        self._controls: Dict[str, Tuple[Any, Dict[str, Any]]] = {}

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def add(self, child, control_type=None, options: Optional[Mapping[str, Any]] = None) -> "FormBuilder":
        if isinstance(child, FormBuilder):
            self._controls[child.name] = (child, {})
        else:
            self._controls[child] = (control_type, dict(options or {}))
        return self

    def create(self, name: str, control_type=None, options: Optional[Mapping[str, Any]] = None) -> "FormBuilder":
        return FormBuilder(name, form_class=control_type, options=options)

    def has(self, name: str) -> bool:
        return name in self._controls

    def get(self, name: str):
        return self._controls[name][0]

    def remove(self, name: str) -> "FormBuilder":
        self._controls.pop(name, None)
        return self

    def names(self):
        return list(self._controls)

    def get_form(self, data=None, prefix: Optional[str] = None) -> GridForm:
        kwargs = {k: self.options[k] for k in FORM_OPTION_KEYS if k in self.options}
        form = self.form_class(data=data, prefix=prefix, name=self.name, **kwargs)
        for name, (control, options) in self._controls.items():
            if isinstance(control, FormBuilder):
                form.add_child(control.get_form(data=data, prefix=form.add_prefix(name)))
            else:
                form.fields[name] = build_field(control, options)
        return form
