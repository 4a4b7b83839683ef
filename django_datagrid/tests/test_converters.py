import re

from django.http import Http404
from django.test import SimpleTestCase
from django.urls import reverse

from django_datagrid.converters import DataGridConverter
from django_datagrid.exceptions import DataGridNotFound
from django_datagrid.grids import DataGrid
from django_datagrid.query import QueryHandlerRegistry
from django_datagrid.registry import DataGridRegistry, datagrid_registry
from django_datagrid.tests.stubs import StubQueryHandler


class DataGridConverterTests(SimpleTestCase):
    def setUp(self):
        self.registry = DataGridRegistry(QueryHandlerRegistry())
        self.datagrid = DataGrid("orders", {"query_handler": StubQueryHandler(), "columns": {}})
        self.registry.add_datagrid(self.datagrid)
        self.converter = DataGridConverter(self.registry)

    def test_regex(self):
        pattern = re.compile(DataGridConverter.regex)
        self.assertTrue(pattern.fullmatch("orders"))
        self.assertTrue(pattern.fullmatch("sales.orders-2024"))
        self.assertFalse(pattern.fullmatch("orders/2024"))

    def test_supports(self):
        self.assertTrue(self.converter.supports(DataGrid))
        self.assertFalse(self.converter.supports(StubQueryHandler))
        self.assertFalse(self.converter.supports(self.datagrid))

    def test_to_python(self):
        self.assertIs(self.converter.to_python("orders"), self.datagrid)

    def test_unknown_code_propagates(self):
        with self.assertRaises(DataGridNotFound) as ctx:
            self.converter.to_python("invoices")
        self.assertIsInstance(ctx.exception, Http404)

    def test_to_url(self):
        self.assertEqual(self.converter.to_url(self.datagrid), "orders")
        self.assertEqual(self.converter.to_url("invoices"), "invoices")

    def test_default_registry(self):
        self.assertIs(DataGridConverter().registry, datagrid_registry)

    def test_reverse_with_instance_or_code(self):
        self.assertEqual(reverse("django_datagrid:datagrid", kwargs={"datagrid": "users"}), "/datagrids/users/")
        self.assertEqual(
            reverse("django_datagrid:datagrid", kwargs={"datagrid": self.datagrid}), "/datagrids/orders/"
        )
