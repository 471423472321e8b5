from django.urls import include, path

from authentication.urls import admin_urlpatterns
from gmtbot_be.views import health

urlpatterns = [
    path("", health, name="health"),
    path("api/auth/", include("authentication.urls")),
    path("api/admin/", include((admin_urlpatterns, "admin_api"))),
    path("api/groups/", include("groups.urls")),
    path("api/", include("chat.urls")),
    path("", include("django_prometheus.urls")),
]
