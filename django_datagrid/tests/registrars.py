"""Registrar used by the settings loader tests."""


def register(registry):
    registry.add_raw_datagrid_configuration(
        "registered",
        {"query_handler": {"model": "auth.User"}, "columns": {"username": {}}},
    )
