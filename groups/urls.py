from django.urls import path

from . import views

app_name = "groups"

urlpatterns = [
    path("", views.groups, name="groups"),
    path("<int:group_id>/sessions/", views.group_sessions, name="group_sessions"),
    path("<int:group_id>/sessions/<int:session_id>/", views.group_session_detail, name="group_session_detail"),
    path("<int:group_id>/sessions/<int:session_id>/messages/", views.group_messages, name="group_messages"),
    path("<int:group_id>/sessions/<int:session_id>/turn/", views.group_turn, name="group_turn"),
]
