from django import template
from django.http import QueryDict
from django.template.loader import render_to_string

register = template.Library()


def _query_params(context) -> QueryDict:
    request = getattr(context, "request", None) or context.get("request")
    if request is None:
        return QueryDict(mutable=True)
    return request.GET.copy()


@register.simple_tag(takes_context=True)
def render_datagrid(context, datagrid, **template_vars):
    """Render an already built and handled datagrid with its own template."""
    request = getattr(context, "request", None) or context.get("request")
    grid_context = dict(datagrid.template_vars)
    grid_context.update(template_vars)
    grid_context.update(
        {
            "datagrid": datagrid,
            "form": datagrid.get_form(),
            "form_view": datagrid.get_form_view(),
            "pager": datagrid.get_pager(),
        }
    )
    return render_to_string(datagrid.template, grid_context, request=request)


@register.simple_tag
def render_column_label(column):
    return column.render_label()


@register.simple_tag
def render_column_value(column, result, **options):
    return column.render_value(result, options or None)


@register.simple_tag(takes_context=True)
def datagrid_sort_url(context, datagrid, column):
    """Query string sorting on ``column``, toggling the direction when already sorted."""
    handler = datagrid.query_handler
    sort_key = getattr(handler, "sort_key", "sort")
    direction_key = getattr(handler, "direction_key", "direction")
    params = _query_params(context)
    params.pop(getattr(handler, "page_key", "page"), None)
    params[sort_key] = column.sort_column
    params[direction_key] = "desc" if handler.get_sort() == (column.sort_column, "asc") else "asc"
    return "?" + params.urlencode()


@register.simple_tag(takes_context=True)
def datagrid_page_url(context, datagrid, page_number):
    params = _query_params(context)
    params[getattr(datagrid.query_handler, "page_key", "page")] = page_number
    return "?" + params.urlencode()
