# groups/views.py
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from chat.serializers import SessionNameSerializer
from chat.turns import ChatTurnOrchestrator
from utils.payload import with_aliases

from . import service as group_service
from .serializers import (
    GroupCreateSerializer,
    GroupMessageSerializer,
    GroupRosterSerializer,
    GroupSerializer,
    GroupSessionSerializer,
    GroupTurnSerializer,
)

log = logging.getLogger(__name__)


@api_view(["GET", "POST"])
def groups(request):
    """GET: roster of the caller's groups
       POST: create a group (global admins only) {name, selected_users}
    """
    if request.method == "GET":
        data = GroupRosterSerializer(group_service.list_groups_for_user(request.user.pk), many=True).data
        return Response(data, status=status.HTTP_200_OK)

    serializer = GroupCreateSerializer(data=with_aliases(request.data, {"selected_users": "selectedUsers"}))
    serializer.is_valid(raise_exception=True)
    group = group_service.create_group(
        request.user,
        serializer.validated_data["name"],
        serializer.validated_data["selected_users"],
    )
    return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)


@api_view(["GET", "POST"])
def group_sessions(request, group_id):
    if request.method == "GET":
        data = GroupSessionSerializer(
            group_service.list_group_sessions(request.user.pk, group_id), many=True
        ).data
        return Response(data, status=status.HTTP_200_OK)

    group_service.require_membership(request.user.pk, group_id)
    serializer = SessionNameSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    session = group_service.create_group_session(
        request.user.pk, group_id, serializer.validated_data.get("name")
    )
    session = group_service.get_group_session(request.user.pk, group_id, session.pk)
    return Response(GroupSessionSerializer(session).data, status=status.HTTP_201_CREATED)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
def group_session_detail(request, group_id, session_id):
    user_id = request.user.pk

    if request.method == "GET":
        session = group_service.get_group_session(user_id, group_id, session_id)
        return Response(GroupSessionSerializer(session).data)

    if request.method in ("PUT", "PATCH"):
        name = request.data.get("name") if hasattr(request.data, "get") else None
        session = group_service.rename_group_session(user_id, group_id, session_id, name)
        return Response(GroupSessionSerializer(session).data)

    group_service.delete_group_session(user_id, group_id, session_id)
    return Response({"success": True}, status=status.HTTP_200_OK)


@api_view(["POST"])
def group_messages(request, group_id, session_id):
    """{content, role?}; membership is checked before the payload."""
    data = request.data if hasattr(request.data, "get") else {}
    message = group_service.add_group_message(
        request.user.pk,
        group_id,
        session_id,
        data.get("content"),
        data.get("role", "user"),
    )
    return Response(GroupMessageSerializer(message).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
def group_turn(request, group_id, session_id):
    """User message always; bot reply only with ask_bot (alias askBot)."""
    group_service.require_membership(request.user.pk, group_id)
    serializer = GroupTurnSerializer(data=with_aliases(request.data, {"ask_bot": "askBot"}))
    serializer.is_valid(raise_exception=True)

    result = ChatTurnOrchestrator().run_group_turn(
        request.user.pk,
        group_id,
        session_id,
        serializer.validated_data["content"],
        ask_bot=serializer.validated_data["ask_bot"],
    )
    return Response(
        {"asked_bot": result.asked_bot, "session": GroupSessionSerializer(result.session).data},
        status=status.HTTP_200_OK,
    )
