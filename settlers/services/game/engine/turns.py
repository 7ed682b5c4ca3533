"""Turn flow, dice rolls and resource distribution."""

import logging
from collections import Counter
from uuid import UUID

from settlers.schemas.board import TileType
from settlers.schemas.game_engine import Game, GamePhase, ResourceBundle, TurnData

from .context import RequestContext
from .events import AnyGameEvent, DiceRoll, DistributeResources, EndTurn, StartTurn
from .validation import StepResult

logger = logging.getLogger(__name__)

ROBBER_TOTAL = 7


def get_data_for_turn(game: Game, turn: int) -> TurnData:
    """Describe turn number ``turn``: its phase and acting player.

    Turns are numbered from 1. The first ``setup_rounds`` rounds are setup
    turns in snake order (seat order, then reversed, and so on); every later
    turn is a playing turn in seat order. Turn 0 is the pre-game snapshot.
    """
    num_players = len(game.players)
    setup_turns = game.setup_rounds * num_players

    if turn < 1:
        return TurnData(turn=0, phase=GamePhase.SETUP, current_player_id=game.players[0].player_id)

    if turn <= setup_turns:
        round_index, offset = divmod(turn - 1, num_players)
        seat = offset if round_index % 2 == 0 else num_players - 1 - offset
        phase = GamePhase.SETUP
    else:
        seat = (turn - setup_turns - 1) % num_players
        phase = GamePhase.PLAYING

    return TurnData(turn=turn, phase=phase, current_player_id=game.players[seat].player_id)


def start(game: Game) -> list[AnyGameEvent]:
    """Events to emit when the engine starts up.

    Only a game that has not begun (turn 0) gets a ``start-turn`` for turn 1;
    calling this again on a running game is a no-op.
    """
    if game.turn >= 1:
        logger.debug("Start skipped: game already at turn %d", game.turn)
        return []

    first_turn = get_data_for_turn(game, 1)
    logger.info(
        "Starting game: players=%d, first_player=%s",
        len(game.players),
        str(first_turn.current_player_id)[:8],
    )
    return [StartTurn.from_turn_data(first_turn)]


def end_turn(ctx: RequestContext) -> StepResult:
    """End the current turn and start the next one.

    When the next turn is a playing turn, its dice are rolled as part of the
    same commit.
    """
    this_turn = get_data_for_turn(ctx.game, ctx.game.turn)
    next_turn = get_data_for_turn(ctx.game, ctx.game.turn + 1)

    ctx.add_event(EndTurn.from_turn_data(this_turn))
    ctx.add_event(StartTurn.from_turn_data(next_turn))
    logger.info(
        "Turn ended: turn=%d, next_turn=%d, next_phase=%s, next_player=%s",
        this_turn.turn,
        next_turn.turn,
        next_turn.phase.value,
        str(next_turn.current_player_id)[:8],
    )

    if next_turn.phase != GamePhase.PLAYING:
        return StepResult.ok()

    return roll_dice(ctx)


def roll_dice(ctx: RequestContext) -> StepResult:
    die1 = ctx.roll_die()
    die2 = ctx.roll_die()
    total = die1 + die2
    ctx.add_event(DiceRoll(die1=die1, die2=die2, total=total))
    logger.info("Dice rolled: %d + %d = %d", die1, die2, total)

    if total == ROBBER_TOTAL:
        return StepResult.ok()

    return distribute_resources(ctx, total)


def resources_for_roll(game: Game, total: int) -> dict[UUID, ResourceBundle]:
    """Resources each player earns when ``total`` is rolled.

    Every owned corner of a matching resource tile earns its owner one unit of
    the tile's resource, two for a city. All players appear in the result.
    """
    counts: dict[UUID, Counter[TileType]] = {p.player_id: Counter() for p in game.players}
    board = game.board

    for tile in board.query_tiles(value=total):
        if not tile.is_resource:
            continue
        for corner in board.adjacent_corners(tile):
            if corner.owner is None:
                continue
            counts.setdefault(corner.owner, Counter())[tile.type] += 2 if corner.city else 1

    return {
        player_id: ResourceBundle.from_counts(player_counts)
        for player_id, player_counts in counts.items()
    }


def distribute_resources(ctx: RequestContext, total: int) -> StepResult:
    resources = resources_for_roll(ctx.game, total)
    ctx.add_event(DistributeResources(resources=resources))
    logger.debug(
        "Distributed resources for %d: %s",
        total,
        {str(pid)[:8]: bundle.total() for pid, bundle in resources.items()},
    )
    return StepResult.ok()
