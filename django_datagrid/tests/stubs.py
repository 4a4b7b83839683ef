"""In-memory query handler used by the unit tests."""

from django_datagrid.query.base import QueryHandler, QueryHandlerConfiguration


def stub_configuration(code="stub", filters=None, **kwargs):
    return QueryHandlerConfiguration.from_mapping(code, {"provider": "stub", "filters": filters or {}, **kwargs})


class StubQueryHandler(QueryHandler):
    def __init__(self, configuration=None):
        super().__init__(configuration or stub_configuration())
        self.build_count = 0
        self.handled = []
        self.results = []

    def build_form(self, builder):
        self.build_count += 1
        filters_builder = builder.create("filters")
        for flt in self.configuration.get_filters():
            filters_builder.add(flt.code, None, {"required": False})
        builder.add(filters_builder)
        self._form = builder.get_form()
        return self._form

    def handle_array(self, data):
        self.handled.append(data)
        self._data = data

    def get_pager(self):
        return list(self.results)
