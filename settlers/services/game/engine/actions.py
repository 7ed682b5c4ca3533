"""Action request types - what the transport layer hands to the engine."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ActionType(str, Enum):
    END_TURN = "end-turn"
    TRADE_OFFER = "trade-offer"
    BUILD_ROAD = "build-road"
    BUILD_SETTLEMENT = "build-settlement"
    BUILD_CITY = "build-city"


class ActionRequest(BaseModel):
    """A player's request to perform one action.

    ``data`` stays an untyped dict here; each rule step parses the part it
    needs so a malformed payload is rejected by the chain that uses it.
    """

    model_config = ConfigDict(populate_by_name=True)

    player_id: UUID = Field(..., alias="playerId")
    type: ActionType
    data: dict[str, Any] = Field(default_factory=dict)


class BuildData(BaseModel):
    """Payload of build-road, build-settlement and build-city."""

    model_config = ConfigDict(populate_by_name=True)

    build_id: int = Field(..., alias="buildId", ge=0, strict=True)


def build_request_from_payload(payload: dict) -> ActionRequest:
    """Build a typed request from a raw ``{playerId, type, data}`` dict.

    Args:
        payload: Dict with 'playerId', 'type' and optional 'data' keys.

    Returns:
        The parsed ActionRequest.

    Raises:
        ValueError: If the type is unknown or the payload is malformed.
    """
    action_type = payload.get("type")
    if action_type not in {t.value for t in ActionType}:
        raise ValueError(f"Unknown action type: {action_type}")

    try:
        return ActionRequest.model_validate(payload)
    except ValidationError as e:
        raise ValueError(f"Malformed action request: {e}") from e
