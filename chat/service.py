# chat/service.py
"""
Session Service: a user's private chat sessions and their messages.

Every lookup is scoped by owner. A session that exists but belongs to
someone else is reported exactly like a missing one.
"""
from __future__ import annotations

import logging
from typing import List

from django.db import transaction
from django.db.models import Prefetch

from utils.errors import BadRequest, NotFound

from .models import (
    DEFAULT_SESSION_NAME,
    MESSAGE_ROLE_CHOICES,
    ROLE_USER,
    ChatMessage,
    ChatSession,
)

log = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"
AUTO_NAME_LENGTH = 30
SESSION_NAME_MAX_LENGTH = 255


def auto_session_name(content: str) -> str:
    """First 30 characters of the message, with '...' when it was cut."""
    if len(content) > AUTO_NAME_LENGTH:
        return content[:AUTO_NAME_LENGTH] + "..."
    return content


def validate_message(content, role) -> tuple[str, str]:
    if role not in dict(MESSAGE_ROLE_CHOICES):
        raise BadRequest("role must be 'user' or 'assistant'")
    if not isinstance(content, str) or not content.strip():
        raise BadRequest("content is required")
    return content, role


def clean_session_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("name is required")
    name = name.strip()
    if len(name) > SESSION_NAME_MAX_LENGTH:
        raise BadRequest(f"name must be at most {SESSION_NAME_MAX_LENGTH} characters")
    return name


def _with_messages(qs):
    return qs.prefetch_related(
        Prefetch("messages", queryset=ChatMessage.objects.order_by("created_at", "id"))
    )


def list_sessions(user_id) -> List[ChatSession]:
    """Most recent first, each with its messages oldest first."""
    qs = ChatSession.objects.filter(user_id=user_id).order_by("-created_at", "-id")
    return list(_with_messages(qs))


def create_session(user_id, name: str | None = None) -> ChatSession:
    session = ChatSession.objects.create(user_id=user_id, name=name or DEFAULT_SESSION_NAME)
    log.info("Session %s created for user %s", session.pk, user_id)
    return session


def _owned_session(user_id, session_id) -> ChatSession:
    session = ChatSession.objects.filter(pk=session_id, user_id=user_id).first()
    if session is None:
        raise NotFound(SESSION_NOT_FOUND)
    return session


def get_session(user_id, session_id) -> ChatSession:
    session = _with_messages(ChatSession.objects.filter(pk=session_id, user_id=user_id)).first()
    if session is None:
        raise NotFound(SESSION_NOT_FOUND)
    return session


def add_message(user_id, session_id, content, role) -> ChatMessage:
    """
    Append a message. The first user message of a session that still has
    the default name also renames the session.
    """
    content, role = validate_message(content, role)

    with transaction.atomic():
        session = _owned_session(user_id, session_id)
        first_user_message = (
            role == ROLE_USER
            and not session.messages.filter(role=ROLE_USER).exists()
        )
        message = ChatMessage.objects.create(
            session=session,
            user_id=user_id,
            role=role,
            content=content,
        )
        if first_user_message and session.name == DEFAULT_SESSION_NAME:
            session.name = auto_session_name(content)
            session.save(update_fields=["name"])

    return message


def rename_session(user_id, session_id, name) -> ChatSession:
    name = clean_session_name(name)
    session = _owned_session(user_id, session_id)
    session.name = name
    session.save(update_fields=["name"])
    return get_session(user_id, session_id)


def delete_session(user_id, session_id) -> None:
    with transaction.atomic():
        session = _owned_session(user_id, session_id)
        # messages first, then the session row
        deleted, _ = ChatMessage.objects.filter(session=session).delete()
        session.delete()
    log.info("Session %s deleted (%s messages)", session_id, deleted)
