from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

from settlers.schemas.board import BoardGraph, TileType


# Game phases
class GamePhase(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"


# Things a player can build
class BuildingKind(str, Enum):
    ROAD = "road"
    SETTLEMENT = "settlement"
    CITY = "city"


class ResourceBundle(BaseModel):
    """Count per resource kind - a player's hand or a cost."""

    brick: int = Field(0, ge=0)
    grain: int = Field(0, ge=0)
    lumber: int = Field(0, ge=0)
    ore: int = Field(0, ge=0)
    wool: int = Field(0, ge=0)

    @classmethod
    def from_counts(cls, counts: dict[TileType, int]) -> "ResourceBundle":
        return cls(**{kind.value: amount for kind, amount in counts.items()})

    def has(self, other: "ResourceBundle") -> bool:
        """True if every amount in ``other`` is covered by this bundle."""
        return all(
            getattr(self, name) >= amount for name, amount in other.model_dump().items()
        )

    def add(self, other: "ResourceBundle") -> "ResourceBundle":
        return ResourceBundle(
            **{
                name: amount + getattr(other, name)
                for name, amount in self.model_dump().items()
            }
        )

    def subtract(self, other: "ResourceBundle") -> "ResourceBundle":
        if not self.has(other):
            raise ValueError(f"Cannot subtract {other} from {self}")
        return ResourceBundle(
            **{
                name: amount - getattr(other, name)
                for name, amount in self.model_dump().items()
            }
        )

    def total(self) -> int:
        return sum(self.model_dump().values())


BUILD_COSTS: dict[BuildingKind, ResourceBundle] = {
    BuildingKind.ROAD: ResourceBundle(lumber=1, brick=1),
    BuildingKind.SETTLEMENT: ResourceBundle(lumber=1, brick=1, wool=1, grain=1),
    BuildingKind.CITY: ResourceBundle(ore=3, grain=2),
}


# Data models for game entities
class PlayerAttributes(BaseModel):
    player_id: UUID
    name: str


class GameSettings(BaseModel):
    player_attributes: list[PlayerAttributes]
    shuffle_tiles: bool = False
    seed: int | None = None


class Player(PlayerAttributes):
    resources: ResourceBundle = Field(default_factory=ResourceBundle)


class Allowance(BaseModel):
    """Per-player cap on owned roads, settlements and cities."""

    roads: int = 15
    settlements: int = 5
    cities: int = 4

    def for_kind(self, kind: BuildingKind) -> int:
        if kind == BuildingKind.ROAD:
            return self.roads
        if kind == BuildingKind.SETTLEMENT:
            return self.settlements
        return self.cities


class TurnData(BaseModel):
    """Snapshot describing one turn: its index, phase and acting player."""

    turn: int = Field(..., ge=0)
    phase: GamePhase
    current_player_id: UUID


class Game(BaseModel):
    """Committed game state.

    Rule handlers only read this. It changes when committed events are
    replayed onto it (``settlers.services.game.engine.replay``).
    """

    turn: int = Field(0, ge=0)
    phase: GamePhase = GamePhase.SETUP
    current_player_id: UUID
    players: list[Player]
    board: BoardGraph
    allowance: Allowance = Field(default_factory=Allowance)
    setup_rounds: int = Field(2, ge=0)

    @property
    def current_player(self) -> Player:
        return next(p for p in self.players if p.player_id == self.current_player_id)

    def get_player(self, player_id: UUID) -> Player | None:
        return next((p for p in self.players if p.player_id == player_id), None)
