from .builder import FormBuilder, GridForm, build_field
from .fields import LinkField, SubmitButtonField
from .view import FormView

__all__ = ["FormBuilder", "GridForm", "FormView", "LinkField", "SubmitButtonField", "build_field"]
