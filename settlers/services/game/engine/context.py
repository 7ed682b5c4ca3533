"""Per-request context handed to every rule step."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from settlers.schemas.board import BoardGraph
from settlers.schemas.game_engine import Game, Player

from .actions import ActionRequest
from .events import AnyGameEvent

logger = logging.getLogger(__name__)

# Returns one die face, 1-6
DiceRoller = Callable[[], int]


@dataclass
class RequestContext:
    """Context for one dispatch.

    Holds the request, a read-only view of the committed game, the acting
    player (None if the id is not seated) and the buffer of events produced
    so far. The buffer belongs to this request alone.
    """

    request: ActionRequest
    game: Game
    player: Player | None
    roll_die: DiceRoller
    events: list[AnyGameEvent] = field(default_factory=list)

    @property
    def player_id(self) -> UUID:
        return self.request.player_id

    @property
    def data(self) -> dict[str, Any]:
        return self.request.data

    @property
    def board(self) -> BoardGraph:
        return self.game.board

    def add_event(self, event: AnyGameEvent) -> None:
        logger.debug("Buffered event: %s", event.event_type)
        self.events.append(event)


def create_context(game: Game, request: ActionRequest, roll_die: DiceRoller) -> RequestContext:
    """Create a fresh context with an empty event buffer."""
    return RequestContext(
        request=request,
        game=game,
        player=game.get_player(request.player_id),
        roll_die=roll_die,
    )
