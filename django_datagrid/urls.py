from django.urls import path, register_converter

from .converters import DataGridConverter
from .views import DataGridView

register_converter(DataGridConverter, "datagrid")

app_name = "django_datagrid"

urlpatterns = [
    path("<datagrid:datagrid>/", DataGridView.as_view(), name="datagrid"),
]
