from django.http import HttpResponse
from django.urls import include, path

from django_datagrid.views import DataGridView


def user_detail(request, pk):
    return HttpResponse(f"user {pk}")


class UserGridView(DataGridView):
    datagrid = "users"

    def get_datagrid(self):
        datagrid = super().get_datagrid()
        datagrid.set_action("owner", {"label": "Owner", "route": "user-detail"})
        return datagrid

    def get_action_parameters(self, datagrid):
        return {"owner": {"pk": self.kwargs["pk"]}}


urlpatterns = [
    path("datagrids/", include("django_datagrid.urls")),
    path("users/<int:pk>/", user_detail, name="user-detail"),
    path("users/<int:pk>/grid/", UserGridView.as_view(), name="user-grid"),
]
