from django.contrib.auth import get_user_model
from django.core.exceptions import ImproperlyConfigured
from django.http import Http404
from django.template import RequestContext, Template
from django.test import RequestFactory, TestCase

from django_datagrid.exceptions import FormNotBuilt
from django_datagrid.forms import FormBuilder
from django_datagrid.registry import datagrid_registry
from django_datagrid.views import DataGridView

User = get_user_model()


class DataGridViewTests(TestCase):
    url = "/datagrids/users/"

    @classmethod
    def setUpTestData(cls):
        User.objects.create(username="alice", email="alice@example.com")
        User.objects.create(username="bob", email="bob@example.com", is_staff=True)
        User.objects.create(username="carol", email="carol@example.com", is_active=False)

    def test_renders_first_page(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "django_datagrid/datagrid.html")
        self.assertContains(response, "Username")
        self.assertContains(response, "E-mail")
        self.assertContains(response, "Staff status")
        self.assertContains(response, "alice@example.com")
        self.assertContains(response, "bob@example.com")
        self.assertNotContains(response, "carol@example.com")
        self.assertContains(response, 'rel="next"')

    def test_context(self):
        response = self.client.get(self.url)
        self.assertEqual(response.context["page_title"], "Users")
        self.assertEqual(response.context["template_vars"], {"page_title": "Users"})
        datagrid = response.context["datagrid"]
        self.assertEqual(datagrid.code, "users")
        self.assertIs(response.context["form"], datagrid.get_form())
        self.assertEqual(response.context["pager"].number, 1)
        self.assertEqual(response.context["form_view"].vars["action"], self.url)

    def test_buttons_and_actions(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'href="/users/new/"')
        self.assertContains(response, "New user")
        self.assertContains(response, 'name="filter_submit_button"')
        self.assertContains(response, f'href="{self.url}"')
        self.assertContains(response, 'name="filters-username"')

    def test_filtering(self):
        response = self.client.get(self.url, {"filters-username": "car"})
        self.assertContains(response, "carol@example.com")
        self.assertNotContains(response, "alice@example.com")

        response = self.client.get(self.url, {"filters-is_active": "false"})
        self.assertContains(response, "carol@example.com")
        self.assertNotContains(response, "bob@example.com")

    def test_sorting(self):
        response = self.client.get(self.url, {"sort": "username", "direction": "desc"})
        self.assertContains(response, "carol@example.com")
        self.assertContains(response, "bob@example.com")
        self.assertNotContains(response, "alice@example.com")

    def test_second_page(self):
        response = self.client.get(self.url, {"page": 2})
        self.assertContains(response, "carol@example.com")
        self.assertContains(response, 'rel="prev"')

    def test_invalid_page(self):
        self.assertEqual(self.client.get(self.url, {"page": 9}).status_code, 404)
        self.assertEqual(self.client.get(self.url, {"page": "abc"}).status_code, 404)

    def test_unknown_datagrid(self):
        self.assertEqual(self.client.get("/datagrids/unknown/").status_code, 404)

    def test_route_parameters_from_view(self):
        response = self.client.get("/users/5/grid/")
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'href="/users/5/"')
        self.assertContains(response, "Owner")

    def test_shared_datagrid_is_untouched(self):
        self.client.get("/users/5/grid/")
        shared = datagrid_registry.get_datagrid("users")
        self.assertFalse(shared.has_action("owner"))
        with self.assertRaises(FormNotBuilt):
            shared.get_form()

    def test_view_without_datagrid(self):
        view = DataGridView()
        view.setup(RequestFactory().get("/"))
        with self.assertRaises(ImproperlyConfigured):
            view.get_datagrid()


class DataGridTagsTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        User.objects.create(username="alice", email="alice@example.com")

    def setUp(self):
        self.request = RequestFactory().get("/report/", {"page": "1", "q": "x"})
        self.datagrid = datagrid_registry.get_datagrid("users").clone()
        self.datagrid.build_form(FormBuilder("users", options={"action": "/report/"}))
        self.datagrid.handle_request(self.request)

    def render(self, source, **context):
        return Template(source).render(RequestContext(self.request, {"datagrid": self.datagrid, **context}))

    def test_render_datagrid(self):
        html = self.render("{% load datagrid_tags %}{% render_datagrid datagrid page_title='Report' %}")
        self.assertIn('id="datagrid-users"', html)
        self.assertIn("alice@example.com", html)

    def test_sort_url_toggles_direction_and_drops_page(self):
        column = self.datagrid.columns[0]
        html = self.render("{% load datagrid_tags %}{% datagrid_sort_url datagrid column %}", column=column)
        self.assertEqual(html, "?q=x&amp;sort=username&amp;direction=asc")

        self.datagrid.handle_array({"sort": "username", "direction": "asc"})
        html = self.render("{% load datagrid_tags %}{% datagrid_sort_url datagrid column %}", column=column)
        self.assertIn("direction=desc", html)

    def test_page_url_keeps_other_parameters(self):
        html = self.render("{% load datagrid_tags %}{% datagrid_page_url datagrid 3 %}")
        self.assertEqual(html, "?page=3&amp;q=x")

    def test_label_and_value_tags(self):
        column = self.datagrid.columns[1]
        result = User.objects.get(username="alice")
        html = self.render(
            "{% load datagrid_tags %}{% render_column_label column %}|{% render_column_value column result %}",
            column=column,
            result=result,
        )
        self.assertEqual(html, "E-mail|alice@example.com")


class PostDataGridView(DataGridView):
    form_method = "post"


class DataGridViewPostTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        User.objects.create(username="alice", email="alice@example.com")

    def make_view(self, request):
        view = PostDataGridView()
        view.setup(request, datagrid=datagrid_registry.get_datagrid("users"))
        return view

    def test_invalid_page_reports_posted_number(self):
        request = RequestFactory().post("/datagrids/users/?page=1", {"page": "9"})
        view = self.make_view(request)
        datagrid = view.get_datagrid()
        datagrid.build_form(view.get_form_builder(datagrid))
        datagrid.handle_request(request)
        self.assertIs(view.get_request_data(datagrid), request.POST)
        with self.assertRaises(Http404) as ctx:
            view.get_pager(datagrid)
        self.assertIn("(9)", str(ctx.exception))

    def test_post_renders_filtered_grid(self):
        request = RequestFactory().post("/datagrids/users/", {"filters-username": "ali"})
        response = self.make_view(request).dispatch(request, datagrid=datagrid_registry.get_datagrid("users"))
        response.render()
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "alice@example.com")
        self.assertContains(response, 'method="post"')
