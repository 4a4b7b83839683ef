from __future__ import annotations

from .grids.datagrid import DataGrid
from .registry import DataGridRegistry, datagrid_registry

__all__ = ["DataGridConverter"]


class DataGridConverter:
    """URL path converter resolving a datagrid code to its :class:`DataGrid`.

    Registry errors propagate unchanged; ``DataGridNotFound`` is an ``Http404``
    so an unknown code answers with a 404.
    """

    regex = r"[-\w.]+"
    target_class = DataGrid

    def __init__(self, registry: DataGridRegistry | None = None):
        self.registry = registry or datagrid_registry

    def supports(self, cls) -> bool:
        return isinstance(cls, type) and issubclass(cls, self.target_class)

    def to_python(self, value: str) -> DataGrid:
        return self.registry.get_datagrid(value)

    def to_url(self, value) -> str:
        if isinstance(value, DataGrid):
            return value.code
        return str(value)
