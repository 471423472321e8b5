# chat/llm.py

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import requests
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

from .monitoring import track_llm_call

logger = logging.getLogger(__name__)


# ===== Exceptions =====

class UpstreamError(APIException):
    """The Langflow endpoint answered with a non-success status or could not be reached."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "LLM provider error"
    default_code = "upstream_error"

    def __init__(self, detail=None, upstream_status: Optional[int] = None):
        super().__init__(detail)
        self.upstream_status = upstream_status


# ===== Payload =====

def individual_session_id(session_id) -> str:
    return f"session_{session_id}"


def group_session_id(session_id) -> str:
    return f"group_{session_id}"


def build_payload(text: str, session_id: str) -> dict:
    return {
        "input_value": text,
        "output_type": "chat",
        "input_type": "chat",
        "session_id": session_id,
    }


# ===== Reply extraction =====

_MISSING = object()


def _dig(obj: Any, *path):
    """Follow dict keys / list indexes; _MISSING as soon as a step does not fit."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(obj, list) or len(obj) <= step:
                return _MISSING
            obj = obj[step]
        else:
            if not isinstance(obj, dict) or step not in obj:
                return _MISSING
            obj = obj[step]
    return obj


def _first_output(data):
    return _dig(data, "outputs", 0, "outputs", 0)


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


def _path_extractor(*path) -> Callable[[Any], Optional[str]]:
    def extract(data):
        return _text(_dig(_first_output(data), *path))
    extract.__name__ = "output." + ".".join(str(p) for p in path)
    return extract


def _top_level(key: str) -> Callable[[Any], Optional[str]]:
    def extract(data):
        return _text(_dig(data, key))
    extract.__name__ = key
    return extract


# Tried in order, first string with visible text wins. The path extractors are
# relative to outputs[0].outputs[0].
REPLY_EXTRACTORS: Tuple[Callable[[Any], Optional[str]], ...] = (
    _path_extractor("results", "message", "data", "text"),
    _path_extractor("results", "message", "text"),
    _path_extractor("outputs", "message", "message"),
    _path_extractor("artifacts", "message"),
    _path_extractor("messages", 0, "message"),
    _top_level("output"),
    _top_level("message"),
)


def extract_reply(data: Any) -> str:
    """
    Pull a human readable reply out of a Langflow run response.
    Never raises: falls back to the serialized response.
    """
    for extractor in REPLY_EXTRACTORS:
        reply = extractor(data)
        if reply is not None:
            return reply
    logger.info("No known reply shape in Langflow response, returning raw JSON")
    return json.dumps(data, default=str)


# ===== Client =====

@dataclass
class LangflowClient:
    """Adapter over the hosted Langflow run endpoint."""

    url: str
    api_key: str = ""
    timeout_s: float = 60

    @classmethod
    def from_settings(cls) -> "LangflowClient":
        return cls(
            url=settings.LANGFLOW_API_URL,
            api_key=getattr(settings, "LANGFLOW_API_KEY", "") or "",
            timeout_s=getattr(settings, "LANGFLOW_TIMEOUT_S", 60),
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    @track_llm_call("langflow.run")
    def run(self, payload: dict) -> Any:
        """POST the payload and return the decoded JSON body."""
        if not self.url:
            raise UpstreamError("LANGFLOW_API_URL is not configured")
        try:
            resp = requests.post(self.url, json=payload, headers=self._headers(), timeout=self.timeout_s)
        except requests.RequestException as e:
            logger.warning("Langflow request failed: %s", e)
            raise UpstreamError(str(e))

        if not 200 <= resp.status_code < 300:
            logger.warning("Langflow answered %s", resp.status_code)
            raise UpstreamError(f"API error: {resp.status_code}", upstream_status=resp.status_code)

        try:
            return resp.json()
        except ValueError:
            raise UpstreamError("Invalid JSON from LLM provider", upstream_status=resp.status_code)

    def process(self, payload: dict) -> str:
        return extract_reply(self.run(payload))


def process(payload: dict) -> str:
    """Forward a turn payload and return the extracted reply text."""
    return LangflowClient.from_settings().process(payload)
