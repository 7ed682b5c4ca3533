import logging
import random
from uuid import UUID

from settlers.config import get_settings
from settlers.schemas.board import BoardGraph
from settlers.schemas.game_engine import (
    Allowance,
    Game,
    GamePhase,
    GameSettings,
    Player,
)

from .board_layout import build_board, standard_tiles

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 4


def validate_game_settings(game_settings: GameSettings) -> None:
    """Validate game settings before initializing a game."""
    num_players = len(game_settings.player_attributes)
    if num_players < MIN_PLAYERS:
        raise ValueError(f"A minimum of {MIN_PLAYERS} players is required to start the game.")
    if num_players > MAX_PLAYERS:
        raise ValueError(f"At most {MAX_PLAYERS} players can join a game.")

    # Ensure each player has a unique id and name
    player_ids: set[UUID] = set()
    player_names: set[str] = set()
    for player in game_settings.player_attributes:
        if player.player_id in player_ids:
            raise ValueError(f"Duplicate player ID found: {player.player_id}")
        if player.name in player_names:
            raise ValueError(f"Duplicate player name found: {player.name}")
        player_ids.add(player.player_id)
        player_names.add(player.name)


def _create_board(game_settings: GameSettings) -> BoardGraph:
    rng = random.Random(game_settings.seed) if game_settings.shuffle_tiles else None
    return build_board(standard_tiles(rng))


def _initialize_players(game_settings: GameSettings) -> list[Player]:
    """Create players in seat order with empty hands."""
    return [
        Player(player_id=attrs.player_id, name=attrs.name)
        for attrs in game_settings.player_attributes
    ]


def initialize_game(game_settings: GameSettings) -> Game:
    """
    Validate game settings and return a Game at turn 0.

    Args:
        game_settings: The players in seat order and board options.

    Returns:
        A Game in the setup phase, ready for the engine's start().

    Raises:
        ValueError: If game settings are invalid.
    """
    validate_game_settings(game_settings)
    settings = get_settings()

    players = _initialize_players(game_settings)
    game = Game(
        turn=0,
        phase=GamePhase.SETUP,
        current_player_id=players[0].player_id,
        players=players,
        board=_create_board(game_settings),
        allowance=Allowance(
            roads=settings.ROAD_ALLOWANCE,
            settlements=settings.SETTLEMENT_ALLOWANCE,
            cities=settings.CITY_ALLOWANCE,
        ),
        setup_rounds=settings.SETUP_ROUNDS,
    )
    logger.info(
        "Game initialized: players=%d, tiles=%d, shuffled=%s",
        len(players),
        len(game.board.tiles),
        game_settings.shuffle_tiles,
    )
    return game
