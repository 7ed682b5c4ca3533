"""Reference state updater - applies committed events to a Game.

The engine itself never changes game state. Whoever stores the game replays
each commit set through ``apply_events`` to get the next state.
"""

import logging
from collections.abc import Iterable

from settlers.schemas.game_engine import BUILD_COSTS, BuildingKind, Game, GamePhase, Player

from .events import (
    AnyGameEvent,
    BuildCity,
    BuildRoad,
    BuildSettlement,
    DistributeResources,
    StartTurn,
)

logger = logging.getLogger(__name__)


def _charge(game: Game, player: Player, kind: BuildingKind) -> None:
    # Setup pieces are free
    if game.phase == GamePhase.PLAYING:
        player.resources = player.resources.subtract(BUILD_COSTS[kind])


def _require_player(game: Game, event: AnyGameEvent) -> Player:
    player = game.get_player(event.player_id)
    if player is None:
        raise ValueError(f"Event {event.event_type} names unknown player {event.player_id}")
    return player


def _apply(game: Game, event: AnyGameEvent) -> None:
    if isinstance(event, StartTurn):
        game.turn = event.turn
        game.phase = event.phase
        game.current_player_id = event.current_player_id

    elif isinstance(event, BuildRoad):
        player = _require_player(game, event)
        game.board.get_edge(event.build_id).owner = player.player_id
        _charge(game, player, BuildingKind.ROAD)

    elif isinstance(event, BuildSettlement):
        player = _require_player(game, event)
        corner = game.board.get_corner(event.build_id)
        corner.owner = player.player_id
        corner.settlement = True
        _charge(game, player, BuildingKind.SETTLEMENT)

    elif isinstance(event, BuildCity):
        player = _require_player(game, event)
        corner = game.board.get_corner(event.build_id)
        corner.city = True
        _charge(game, player, BuildingKind.CITY)

    elif isinstance(event, DistributeResources):
        for player_id, bundle in event.resources.items():
            player = game.get_player(player_id)
            if player is None:
                raise ValueError(f"Resources credited to unknown player {player_id}")
            player.resources = player.resources.add(bundle)

    # EndTurn, DiceRoll and TradeOffer carry no state change


def apply_events(game: Game, events: Iterable[AnyGameEvent]) -> Game:
    """Return a copy of ``game`` with the events applied in order.

    Raises:
        ValueError: If an event names an unknown player or a player cannot
            pay for a build.
        BoardLookupError: If an event names a missing corner or edge.
    """
    new_game = game.model_copy(deep=True)
    applied = 0
    for event in events:
        _apply(new_game, event)
        applied += 1
    logger.debug("Applied %d events: turn=%d, phase=%s", applied, new_game.turn, new_game.phase.value)
    return new_game
