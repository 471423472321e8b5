# groups/service.py
"""
Group Service: groups, memberships, group sessions and group messages.

Two independent authorization axes:
  - creating a group needs the global User.role == "admin"
  - everything under a group needs a GroupMember row for the caller,
    checked before any other lookup (GroupMember.role is informational)
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from django.db import transaction
from django.db.models import OuterRef, Prefetch, Subquery

from authentication.models import User
from chat.models import ROLE_ASSISTANT
from chat.service import clean_session_name, validate_message
from utils.errors import BadRequest, Forbidden, NotFound

from .models import (
    DEFAULT_GROUP_SESSION_NAME,
    Group,
    GroupMember,
    GroupMessage,
    GroupSession,
)

log = logging.getLogger(__name__)

NOT_A_MEMBER = "Not a member of this group"
GROUP_SESSION_NOT_FOUND = "Group session not found"


def require_membership(user_id, group_id) -> GroupMember:
    """403 for non-members, whether or not the group exists."""
    membership = GroupMember.objects.filter(group_id=group_id, user_id=user_id).first()
    if membership is None:
        raise Forbidden(NOT_A_MEMBER)
    return membership


def _with_messages(qs):
    return qs.prefetch_related(
        Prefetch(
            "messages",
            queryset=GroupMessage.objects.select_related("user").order_by("created_at", "id"),
        )
    )


def _session_in_group(group_id, session_id) -> GroupSession:
    session = GroupSession.objects.filter(pk=session_id, group_id=group_id).first()
    if session is None:
        raise NotFound(GROUP_SESSION_NOT_FOUND)
    return session


# ---------------- groups ----------------

def list_groups_for_user(user_id) -> List[Group]:
    """
    Groups the user belongs to, by name. Each group carries `my_role` (the
    caller's group role), its members and `last_session` (or None).
    """
    latest = GroupSession.objects.filter(group_id=OuterRef("pk")).order_by("-created_at", "-id")
    groups = list(
        Group.objects.filter(members__user_id=user_id)
        .annotate(last_session_id=Subquery(latest.values("pk")[:1]))
        .prefetch_related(
            Prefetch("members", queryset=GroupMember.objects.select_related("user").order_by("id"))
        )
        .order_by("name", "id")
    )

    last_sessions = GroupSession.objects.in_bulk(
        [g.last_session_id for g in groups if g.last_session_id is not None]
    )
    for group in groups:
        group.my_role = next(m.role for m in group.members.all() if m.user_id == user_id)
        group.last_session = last_sessions.get(group.last_session_id)
    return groups


def _parse_member_ids(member_ids: Iterable) -> List[int]:
    ids = []
    for raw in member_ids or []:
        try:
            ids.append(int(raw))
        except (TypeError, ValueError):
            raise BadRequest(f"Invalid user id: {raw}")
    return list(dict.fromkeys(ids))


def create_group(requestor, name, member_ids=None) -> Group:
    """
    Create a group, the requestor as its admin and the listed users as
    members. All of it happens in one transaction.
    """
    if requestor is None or not requestor.is_admin:
        raise Forbidden("Admin access required")
    if not isinstance(name, str) or not name.strip():
        raise BadRequest("Group name is required")

    ids = [i for i in _parse_member_ids(member_ids) if i != requestor.pk]
    known = set(User.objects.filter(pk__in=ids).values_list("pk", flat=True))
    unknown = [i for i in ids if i not in known]
    if unknown:
        raise BadRequest(f"Unknown user id(s): {', '.join(str(i) for i in unknown)}")

    with transaction.atomic():
        group = Group.objects.create(name=name.strip(), created_by=requestor)
        GroupMember.objects.create(group=group, user=requestor, role=GroupMember.ROLE_ADMIN)
        GroupMember.objects.bulk_create(
            [GroupMember(group=group, user_id=i, role=GroupMember.ROLE_MEMBER) for i in ids]
        )

    log.info("Group %s (%s) created by %s with %d members", group.pk, group.name, requestor.email, len(ids))
    return get_group(group.pk)


def get_group(group_id) -> Group:
    return (
        Group.objects.prefetch_related(
            Prefetch("members", queryset=GroupMember.objects.select_related("user").order_by("id"))
        )
        .get(pk=group_id)
    )


# ---------------- group sessions ----------------

def list_group_sessions(user_id, group_id) -> List[GroupSession]:
    require_membership(user_id, group_id)
    qs = GroupSession.objects.filter(group_id=group_id).order_by("-created_at", "-id")
    return list(_with_messages(qs))


def create_group_session(user_id, group_id, name: str | None = None) -> GroupSession:
    require_membership(user_id, group_id)
    return GroupSession.objects.create(group_id=group_id, name=name or DEFAULT_GROUP_SESSION_NAME)


def get_group_session(user_id, group_id, session_id) -> GroupSession:
    require_membership(user_id, group_id)
    session = _with_messages(GroupSession.objects.filter(pk=session_id, group_id=group_id)).first()
    if session is None:
        raise NotFound(GROUP_SESSION_NOT_FOUND)
    return session


def add_group_message(user_id, group_id, session_id, content, role="user") -> GroupMessage:
    """Assistant messages are stored without an author."""
    require_membership(user_id, group_id)
    content, role = validate_message(content, role)
    session = _session_in_group(group_id, session_id)
    return GroupMessage.objects.create(
        session=session,
        user_id=None if role == ROLE_ASSISTANT else user_id,
        role=role,
        content=content,
    )


def rename_group_session(user_id, group_id, session_id, name) -> GroupSession:
    require_membership(user_id, group_id)
    name = clean_session_name(name)
    session = _session_in_group(group_id, session_id)
    session.name = name
    session.save(update_fields=["name"])
    return get_group_session(user_id, group_id, session_id)


def delete_group_session(user_id, group_id, session_id) -> None:
    require_membership(user_id, group_id)
    with transaction.atomic():
        session = _session_in_group(group_id, session_id)
        deleted, _ = GroupMessage.objects.filter(session=session).delete()
        session.delete()
    log.info("Group session %s of group %s deleted (%s messages)", session_id, group_id, deleted)
