# chat/views.py
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from utils.payload import with_aliases

from . import llm
from . import service as chat_service
from .serializers import (
    MessageCreateSerializer,
    MessageSerializer,
    SessionNameSerializer,
    SessionSerializer,
    TurnSerializer,
)
from .turns import ChatTurnOrchestrator

log = logging.getLogger(__name__)


@api_view(["GET", "POST"])
def sessions(request):
    """GET: the caller's sessions, newest first, with their messages
       POST: create a session ({name?}, defaults to "New Chat")
    """
    if request.method == "GET":
        data = SessionSerializer(chat_service.list_sessions(request.user.pk), many=True).data
        return Response(data, status=status.HTTP_200_OK)

    serializer = SessionNameSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    session = chat_service.create_session(request.user.pk, serializer.validated_data.get("name"))
    session = chat_service.get_session(request.user.pk, session.pk)
    return Response(SessionSerializer(session).data, status=status.HTTP_201_CREATED)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
def session_detail(request, sid):
    user_id = request.user.pk

    if request.method == "GET":
        return Response(SessionSerializer(chat_service.get_session(user_id, sid)).data)

    if request.method in ("PUT", "PATCH"):
        serializer = SessionNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = chat_service.rename_session(user_id, sid, serializer.validated_data["name"])
        return Response(SessionSerializer(session).data)

    chat_service.delete_session(user_id, sid)
    return Response({"success": True}, status=status.HTTP_200_OK)


@api_view(["POST"])
def post_message(request, sid):
    """Append {content, role} to one of the caller's sessions."""
    serializer = MessageCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    message = chat_service.add_message(
        request.user.pk,
        sid,
        serializer.validated_data["content"],
        serializer.validated_data["role"],
    )
    return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@api_view(["POST"])
def turn(request):
    """
    One individual chat turn.

    - without session_id: a session is created and returned, nothing is sent
    - with session_id: user message, LLM reply (or "Error: ..."), re-fetched session
    """
    serializer = TurnSerializer(data=with_aliases(request.data, {"session_id": "sessionId"}))
    serializer.is_valid(raise_exception=True)

    result = ChatTurnOrchestrator().run_individual_turn(
        request.user.pk,
        serializer.validated_data["content"],
        serializer.validated_data.get("session_id"),
    )
    code = status.HTTP_200_OK if result.sent else status.HTTP_201_CREATED
    return Response({"sent": result.sent, "session": SessionSerializer(result.session).data}, status=code)


@api_view(["POST"])
def llm_process(request):
    """
    Forward {input_value, output_type, input_type, session_id} to Langflow.
    Returns the extracted reply next to the provider's raw JSON; 502 on upstream failure.
    """
    payload = request.data if isinstance(request.data, dict) else {}
    if not payload.get("input_value"):
        return Response({"error": "input_value is required"}, status=status.HTTP_400_BAD_REQUEST)

    raw = llm.LangflowClient.from_settings().run(dict(payload))
    return Response({"reply": llm.extract_reply(raw), "raw": raw}, status=status.HTTP_200_OK)
