from .column import Column
from .datagrid import DataGrid
from .options import ControlOptions, DataGridOptions, merge_control_options

__all__ = ["Column", "DataGrid", "DataGridOptions", "ControlOptions", "merge_control_options"]
