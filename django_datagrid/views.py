from __future__ import annotations

from typing import Any, Dict, Mapping

from django.core.exceptions import ImproperlyConfigured
from django.core.paginator import InvalidPage
from django.http import Http404
from django.utils.translation import gettext as _
from django.views.generic import TemplateView

from .forms.builder import FormBuilder
from .grids.datagrid import DataGrid
from .registry import DataGridRegistry, datagrid_registry

__all__ = ["DataGridView"]


class DataGridView(TemplateView):
    """Render a datagrid: filter form, actions, current page of results.

    The grid comes from the ``datagrid`` URL kwarg (see
    :class:`~django_datagrid.converters.DataGridConverter`) or from the
    ``datagrid`` class attribute, as an instance or a code. The view works on
    a clone so the registry's shared instance never holds request state.
    """

    datagrid: DataGrid | str | None = None
    datagrid_kwarg = "datagrid"
    registry: DataGridRegistry | None = None
    form_method = "get"

    def get_registry(self) -> DataGridRegistry:
        return self.registry or datagrid_registry

    def get_datagrid(self) -> DataGrid:
        datagrid = self.kwargs.get(self.datagrid_kwarg, self.datagrid)
        if datagrid is None:
            raise ImproperlyConfigured(
                f"{self.__class__.__name__} needs a '{self.datagrid_kwarg}' URL kwarg or a datagrid attribute"
            )
        if isinstance(datagrid, str):
            datagrid = self.get_registry().get_datagrid(datagrid)
        return datagrid.clone()

    def get_action_parameters(self, datagrid: DataGrid) -> Mapping[str, Mapping[str, Any]]:
        """Route parameters per action (or ``submit_button``/``reset_button``)."""
        return {}

    def get_form_builder(self, datagrid: DataGrid) -> FormBuilder:
        options: Dict[str, Any] = {"action": self.request.path, "method": self.form_method}
        options.update(datagrid.form_options)
        return FormBuilder(datagrid.code, options=options)

    def get_request_data(self, datagrid: DataGrid):
        """The request data the query handler binds, following the form method."""
        if getattr(datagrid.get_form(), "method", "get") == "post":
            return self.request.POST
        return self.request.GET

    def get_pager(self, datagrid: DataGrid):
        try:
            return datagrid.get_pager()
        except InvalidPage as e:
            page_key = getattr(datagrid.query_handler, "page_key", "page")
            page_number = self.get_request_data(datagrid).get(page_key)
            raise Http404(
                _("Invalid page (%(page_number)s): %(message)s") % {"page_number": page_number, "message": str(e)}
            ) from e

    def get(self, request, *args, **kwargs):
        datagrid = self.current_datagrid = self.get_datagrid()
        for action, parameters in self.get_action_parameters(datagrid).items():
            datagrid.set_action_parameters(action, parameters)
        datagrid.build_form(self.get_form_builder(datagrid))
        datagrid.handle_request(request)
        context = dict(datagrid.template_vars)
        context.update(
            template_vars=datagrid.template_vars,
            datagrid=datagrid,
            form=datagrid.get_form(),
            form_view=datagrid.get_form_view(),
            pager=self.get_pager(datagrid),
        )
        return self.render_to_response(self.get_context_data(**context))

    def post(self, request, *args, **kwargs):
        return self.get(request, *args, **kwargs)

    def get_template_names(self):
        if self.template_name:
            return [self.template_name]
        return [self.current_datagrid.template]
