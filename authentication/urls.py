from django.urls import path

from authentication import views

app_name = "authentication"

urlpatterns = [
    path("login/", views.login, name="login"),
    path("register/", views.register, name="register"),
    path("me/", views.me, name="me"),
]

admin_urlpatterns = [
    path("users/", views.admin_users, name="admin_users"),
    path("users/<int:user_id>/", views.admin_user_detail, name="admin_user_detail"),
    path("is-admin/", views.is_admin, name="is_admin"),
]
