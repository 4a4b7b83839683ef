from django.apps import AppConfig


class DataGridConfig(AppConfig):
    name = "django_datagrid"
    verbose_name = "Datagrids"

    def ready(self):
        from .register import load_datagrids

        load_datagrids()
