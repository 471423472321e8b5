from django.urls import path

from . import views

app_name = "chat"

urlpatterns = [
    path("sessions/", views.sessions, name="sessions"),
    path("sessions/<int:sid>/", views.session_detail, name="session_detail"),
    path("sessions/<int:sid>/messages/", views.post_message, name="post_message"),
    path("chat/turn/", views.turn, name="turn"),
    path("llm/process/", views.llm_process, name="llm_process"),
]
