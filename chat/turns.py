# chat/turns.py
"""
Chat turn orchestration.

Individual turn:
    1. no session -> create one and stop (the client resubmits)
    2. store the user message
    3. ask the LLM; a failure is stored as an "Error: ..." assistant message
    4. return the re-fetched session

Group turn:
    the user message is always stored; the LLM is only asked when the turn
    is flagged ask_bot, and its reply is stored without an author.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from groups import service as group_service

from . import llm
from . import service as session_service
from .models import ROLE_ASSISTANT, ROLE_USER

logger = logging.getLogger(__name__)


class ReplyGenerator(Protocol):
    def __call__(self, payload: dict) -> str:
        ...


EMPTY_REPLY = "Error: Empty response from LLM provider"


def error_reply(exc: Exception) -> str:
    detail = getattr(exc, "detail", None)
    return f"Error: {detail if detail is not None else exc}"


@dataclass
class TurnResult:
    session: object
    sent: bool = True
    asked_bot: bool = False


@dataclass
class ChatTurnOrchestrator:
    """Runs a chat turn against the session services and a reply generator."""

    llm: Optional[ReplyGenerator] = None

    def _ask(self, text: str, llm_session_id: str) -> str:
        generate = self.llm or llm.process
        try:
            reply = generate(llm.build_payload(text, llm_session_id))
        except Exception as e:
            # failures go into the transcript
            logger.warning("LLM call failed for %s: %s", llm_session_id, e)
            return error_reply(e)
        if not isinstance(reply, str) or not reply.strip():
            logger.warning("LLM returned an empty reply for %s", llm_session_id)
            return EMPTY_REPLY
        return reply

    def run_individual_turn(self, user_id, content, session_id: Optional[int] = None) -> TurnResult:
        if session_id is None:
            session = session_service.create_session(user_id)
            return TurnResult(session=session, sent=False)

        session_service.add_message(user_id, session_id, content, ROLE_USER)
        reply = self._ask(content, llm.individual_session_id(session_id))
        session_service.add_message(user_id, session_id, reply, ROLE_ASSISTANT)
        return TurnResult(session=session_service.get_session(user_id, session_id))

    def run_group_turn(self, user_id, group_id, session_id, content, ask_bot: bool = False) -> TurnResult:
        group_service.add_group_message(user_id, group_id, session_id, content, ROLE_USER)
        if ask_bot:
            reply = self._ask(content, llm.group_session_id(session_id))
            group_service.add_group_message(user_id, group_id, session_id, reply, ROLE_ASSISTANT)
        return TurnResult(
            session=group_service.get_group_session(user_id, group_id, session_id),
            asked_bot=bool(ask_bot),
        )

