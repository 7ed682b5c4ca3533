"""Game event types - the facts a committed action produces.

Events are the only way the engine reports changes. The transport layer
broadcasts them and a state updater replays them onto the Game.
"""

from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from settlers.schemas.game_engine import GamePhase, ResourceBundle, TurnData


class GameEvent(BaseModel):
    """Base class for all game events."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    event_type: str

    def payload(self) -> dict[str, Any]:
        """Wire payload: the event's fields with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude={"event_type"})

    def to_message(self) -> dict[str, Any]:
        return {"type": self.event_type, "payload": self.payload()}


class BuildRoad(GameEvent):
    event_type: Literal["build-road"] = "build-road"
    player_id: UUID
    build_id: int


class BuildSettlement(GameEvent):
    event_type: Literal["build-settlement"] = "build-settlement"
    player_id: UUID
    build_id: int


class BuildCity(GameEvent):
    event_type: Literal["build-city"] = "build-city"
    player_id: UUID
    build_id: int


class TradeOffer(GameEvent):
    """A trade offer. Offer fields are carried through as extra fields."""

    model_config = ConfigDict(extra="allow")

    event_type: Literal["trade-offer"] = "trade-offer"
    player_id: UUID


class StartTurn(GameEvent):
    """A turn has begun."""

    event_type: Literal["start-turn"] = "start-turn"
    turn: int
    phase: GamePhase
    current_player_id: UUID

    @classmethod
    def from_turn_data(cls, data: TurnData) -> "StartTurn":
        return cls(**data.model_dump())


class EndTurn(GameEvent):
    """A turn has finished."""

    event_type: Literal["end-turn"] = "end-turn"
    turn: int
    phase: GamePhase
    current_player_id: UUID

    @classmethod
    def from_turn_data(cls, data: TurnData) -> "EndTurn":
        return cls(**data.model_dump())


class DiceRoll(GameEvent):
    event_type: Literal["DiceRoll"] = "DiceRoll"
    die1: int = Field(..., ge=1, le=6)
    die2: int = Field(..., ge=1, le=6)
    total: int = Field(..., ge=2, le=12)


class DistributeResources(GameEvent):
    """Resources credited to players, keyed by player id."""

    event_type: Literal["distribute-resources"] = "distribute-resources"
    resources: dict[UUID, ResourceBundle]

    def payload(self) -> dict[str, Any]:
        return {
            str(player_id): bundle.model_dump()
            for player_id, bundle in self.resources.items()
        }


# Union of all event types for type checking
AnyGameEvent = Annotated[
    BuildRoad
    | BuildSettlement
    | BuildCity
    | TradeOffer
    | StartTurn
    | EndTurn
    | DiceRoll
    | DistributeResources,
    Field(discriminator="event_type"),
]
