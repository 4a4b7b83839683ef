"""Link and submit controls used for datagrid buttons and actions.

Both controls render a single element and never contribute data: their
widgets read nothing from the submitted payload and their ``clean`` returns
``None``.
"""
from __future__ import annotations

from django import forms
from django.forms.utils import flatatt
from django.urls import reverse
from django.utils.html import format_html

__all__ = ["LinkWidget", "SubmitWidget", "LinkField", "SubmitButtonField"]


class TargetMixin:
    """Resolves a target URL from either a ``uri`` or a named ``route``."""

    def set_target(self, uri=None, route=None, route_parameters=None):
        self.uri = uri
        self.route = route
        self.route_parameters = dict(route_parameters or {})

    def get_target(self):
        if self.route:
            return reverse(self.route, kwargs=self.route_parameters or None)
        return self.uri


class LinkWidget(TargetMixin, forms.Widget):
    def __init__(self, label="", uri=None, route=None, route_parameters=None, attrs=None):
        super().__init__(attrs)
        self.label = label
        self.set_target(uri, route, route_parameters)

    def get_href(self) -> str:
        return self.get_target() or "#"

    def render(self, name, value, attrs=None, renderer=None):
        final_attrs = self.build_attrs(self.attrs, attrs)
        return format_html("<a href=\"{}\"{}>{}</a>", self.get_href(), flatatt(final_attrs), self.label)

    def value_from_datadict(self, data, files, name):
        return None

    def value_omitted_from_data(self, data, files, name):
        return True


class SubmitWidget(TargetMixin, forms.Widget):
    """Submit button; a uri or route becomes its ``formaction``."""

    def __init__(self, label="", uri=None, route=None, route_parameters=None, attrs=None):
        super().__init__(attrs)
        self.label = label
        self.set_target(uri, route, route_parameters)

    def render(self, name, value, attrs=None, renderer=None):
        final_attrs = self.build_attrs(self.attrs, attrs)
        target = self.get_target()
        if target:
            final_attrs["formaction"] = target
        return format_html(
            "<button type=\"submit\" name=\"{}\"{}>{}</button>", name, flatatt(final_attrs), self.label
        )

    def value_from_datadict(self, data, files, name):
        return None

    def value_omitted_from_data(self, data, files, name):
        return True


class LinkField(forms.Field):
    """Anchor pointing either at ``uri`` or at a named ``route``."""

    def __init__(self, *, uri=None, route=None, route_parameters=None, label=None, **kwargs):
        kwargs.setdefault("required", False)
        kwargs["widget"] = LinkWidget(
            label=label or "", uri=uri, route=route, route_parameters=route_parameters
        )
        super().__init__(label=label, **kwargs)

    @property
    def href(self) -> str:
        return self.widget.get_href()

    def clean(self, value):
        return None


class SubmitButtonField(forms.Field):
    def __init__(self, *, uri=None, route=None, route_parameters=None, label=None, **kwargs):
        kwargs.setdefault("required", False)
        kwargs["widget"] = SubmitWidget(
            label=label or "", uri=uri, route=route, route_parameters=route_parameters
        )
        super().__init__(label=label, **kwargs)

    def clean(self, value):
        return None
