"""Shared fixtures for game engine tests."""

from collections.abc import Iterator
from uuid import UUID

import pytest

from settlers.schemas.board import BoardGraph, Corner
from settlers.schemas.game_engine import (
    Allowance,
    Game,
    GamePhase,
    Player,
    ResourceBundle,
)
from settlers.services.game.board_layout import build_board, standard_tiles
from settlers.services.game.engine import ActionRequest, ActionType, DiceRoller

# Fixed UUIDs for deterministic testing
PLAYER_1_ID = UUID("00000000-0000-0000-0000-000000000001")
PLAYER_2_ID = UUID("00000000-0000-0000-0000-000000000002")
PLAYER_3_ID = UUID("00000000-0000-0000-0000-000000000003")

RICH = ResourceBundle(brick=10, grain=10, lumber=10, ore=10, wool=10)


def create_player(
    player_id: UUID,
    name: str,
    resources: ResourceBundle | None = None,
) -> Player:
    """Helper to create a player."""
    return Player(
        player_id=player_id,
        name=name,
        resources=resources or ResourceBundle(),
    )


def create_game(
    players: list[Player],
    phase: GamePhase,
    turn: int,
    current_player_id: UUID | None = None,
    board: BoardGraph | None = None,
    allowance: Allowance | None = None,
) -> Game:
    """Helper to create a game on the beginner board."""
    return Game(
        turn=turn,
        phase=phase,
        current_player_id=current_player_id or players[0].player_id,
        players=players,
        board=board or build_board(standard_tiles()),
        allowance=allowance or Allowance(),
    )


def request(player_id: UUID, action_type: ActionType, **data) -> ActionRequest:
    """Helper to build an action request."""
    return ActionRequest(player_id=player_id, type=action_type, data=data)


def fixed_dice(*faces: int) -> DiceRoller:
    """Die source returning the given faces in order."""
    it: Iterator[int] = iter(faces)
    return lambda: next(it)


def place_settlement(game: Game, corner_id: int, player_id: UUID, city: bool = False) -> None:
    """Put a building on the board directly (test setup only)."""
    corner = game.board.get_corner(corner_id)
    corner.owner = player_id
    corner.settlement = True
    corner.city = city


def place_road(game: Game, edge_id: int, player_id: UUID) -> None:
    """Put a road on the board directly (test setup only)."""
    game.board.get_edge(edge_id).owner = player_id


def other_end(game: Game, edge_id: int, corner_id: int) -> Corner:
    """The corner at the far end of an edge."""
    a, b = game.board.get_edge(edge_id).corners
    return game.board.get_corner(b if a == corner_id else a)


def top_corner(game: Game) -> Corner:
    """A corner on the top row of tiles, far from the bottom row."""
    return game.board.get_corner(game.board.tiles[0].corners[0])


def bottom_corner(game: Game) -> Corner:
    """A corner on the bottom row of tiles."""
    return game.board.get_corner(game.board.tiles[18].corners[0])


@pytest.fixture
def player1() -> Player:
    return create_player(PLAYER_1_ID, "Player 1")


@pytest.fixture
def player2() -> Player:
    return create_player(PLAYER_2_ID, "Player 2")


@pytest.fixture
def board() -> BoardGraph:
    """The beginner board, nothing built."""
    return build_board(standard_tiles())


@pytest.fixture
def setup_game(player1: Player, player2: Player) -> Game:
    """Two-player game on turn 1 of setup, player 1 to act."""
    return create_game([player1, player2], GamePhase.SETUP, turn=1)


@pytest.fixture
def playing_game() -> Game:
    """Two-player game in the playing phase, player 1 to act.

    Player 1 has plenty of resources, a settlement on ``top_corner`` and one
    road leaving it.
    """
    game = create_game(
        [create_player(PLAYER_1_ID, "Player 1", RICH), create_player(PLAYER_2_ID, "Player 2")],
        GamePhase.PLAYING,
        turn=5,
    )
    corner = top_corner(game)
    place_settlement(game, corner.id, PLAYER_1_ID)
    place_road(game, corner.edges[0], PLAYER_1_ID)
    return game
