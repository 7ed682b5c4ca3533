"""Legal build targets for a player during the playing phase."""

from uuid import UUID

from settlers.schemas.board import BoardGraph, Corner, Edge


def _extends_network(board: BoardGraph, corner: Corner, player_id: UUID) -> bool:
    """Whether a road may continue from ``corner`` for this player.

    The player's own building always connects. Otherwise the corner must
    touch one of the player's roads and must not hold an opponent's building.
    """
    if corner.owner == player_id:
        return True
    if corner.owner is not None:
        return False
    return any(edge.owner == player_id for edge in board.adjacent_edges(corner))


def get_buildable_edges_for_player(board: BoardGraph, player_id: UUID) -> list[Edge]:
    """Unowned edges connected to the player's roads or buildings.

    Args:
        board: Committed board state.
        player_id: The player who wants to build.

    Returns:
        Edges the player may build a road on, in board order.
    """
    return [
        edge
        for edge in board.edges
        if board.is_edge_buildable(edge)
        and any(
            _extends_network(board, corner, player_id)
            for corner in board.adjacent_corners(edge)
        )
    ]


def get_buildable_corners_for_player(board: BoardGraph, player_id: UUID) -> list[Corner]:
    """Buildable corners (spacing rule holds) reached by one of the player's roads."""
    return [
        corner
        for corner in board.corners
        if board.is_corner_buildable(corner)
        and any(edge.owner == player_id for edge in board.adjacent_edges(corner))
    ]
