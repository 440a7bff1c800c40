"""
Message shapes exchanged between the foreground session and the background monitor.

Messages travel as JSON-compatible dicts keyed by "action". The builders below
produce them; on the receiving side `parse_request` validates a dict against the
pydantic model for its action before any handler sees it.
"""

import json
from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

PING = "ping"
UPDATE_POSTURE = "updatePosture"
SESSION_STATUS = "sessionStatus"
GET_STATUS = "getStatus"
START_MONITORING = "startMonitoring"
STOP_MONITORING = "stopMonitoring"
UPDATE_SCORE = "updateScore"

# Sent by the foreground page (external to the background context)
EXTERNAL_ACTIONS = (PING, UPDATE_POSTURE, SESSION_STATUS)
# Sent by the background's own control surfaces (popup, status views)
INTERNAL_ACTIONS = (GET_STATUS, START_MONITORING, STOP_MONITORING, UPDATE_SCORE)


# ============================================================================
# Request models
# ============================================================================

class Request(BaseModel):
    """Any message; actions without a payload validate against this alone."""
    model_config = ConfigDict(strict=True, extra="ignore")

    action: str


class PostureData(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    postureScore: float = Field(ge=0, le=100)
    cervicalAngle: float = Field(default=0.0, ge=0, le=180)
    isPersonDetected: bool = False


class UpdatePostureRequest(Request):
    data: PostureData


class SessionStatusRequest(Request):
    isActive: bool


class UpdateScoreRequest(Request):
    score: float = Field(ge=0, le=100)


REQUEST_MODELS: Dict[str, Type[Request]] = {
    UPDATE_POSTURE: UpdatePostureRequest,
    SESSION_STATUS: SessionStatusRequest,
    UPDATE_SCORE: UpdateScoreRequest,
}


def parse_request(request: Any, allowed_actions: Iterable[str]) -> Optional[Request]:
    """
    Validate a raw message.

    Returns None when the action is missing or not in `allowed_actions`.
    Raises pydantic.ValidationError when a known action carries a bad payload.
    """
    action = request.get("action") if isinstance(request, dict) else None
    if action not in allowed_actions:
        return None
    return REQUEST_MODELS.get(action, Request).model_validate(request)


# ============================================================================
# Builders
# ============================================================================

def ping() -> Dict[str, Any]:
    return {"action": PING}


def update_posture(posture_score: float, cervical_angle: float, is_person_detected: bool) -> Dict[str, Any]:
    return {
        "action": UPDATE_POSTURE,
        "data": {
            "postureScore": posture_score,
            "cervicalAngle": cervical_angle,
            "isPersonDetected": is_person_detected,
        },
    }


def session_status(is_active: bool) -> Dict[str, Any]:
    return {"action": SESSION_STATUS, "isActive": bool(is_active)}


def get_status() -> Dict[str, Any]:
    return {"action": GET_STATUS}


def start_monitoring() -> Dict[str, Any]:
    return {"action": START_MONITORING}


def stop_monitoring() -> Dict[str, Any]:
    return {"action": STOP_MONITORING}


def update_score(score: float) -> Dict[str, Any]:
    return {"action": UPDATE_SCORE, "score": score}


def encode(message: Optional[Dict[str, Any]]) -> str:
    return json.dumps(message)


def decode(raw: str) -> Optional[Dict[str, Any]]:
    return json.loads(raw)
