"""Board construction - derives the corner/edge/tile graph from tile positions."""

import logging
import random

from pydantic import BaseModel, Field

from settlers.schemas.board import BoardGraph, Corner, Edge, Tile, TileType

from .geometry import tile_corner_points

logger = logging.getLogger(__name__)

# Base game tile mix (19 tiles) and number tokens (18, the desert has none)
STANDARD_TILE_TYPES: tuple[TileType, ...] = (
    TileType.ORE, TileType.WOOL, TileType.LUMBER,
    TileType.GRAIN, TileType.BRICK, TileType.WOOL, TileType.BRICK,
    TileType.GRAIN, TileType.LUMBER, TileType.DESERT, TileType.LUMBER, TileType.ORE,
    TileType.LUMBER, TileType.ORE, TileType.GRAIN, TileType.WOOL,
    TileType.BRICK, TileType.GRAIN, TileType.WOOL,
)  # fmt: skip
STANDARD_NUMBER_TOKENS: tuple[int, ...] = (
    10, 2, 9, 12, 6, 4, 10, 9, 11, 3, 8, 8, 3, 4, 5, 5, 6, 11,
)  # fmt: skip


class TileSpec(BaseModel):
    """Placement of one tile before the board graph is built."""

    type: TileType
    value: int | None = Field(None, ge=2, le=12)
    q: int
    r: int


def axial_coordinates(radius: int) -> list[tuple[int, int]]:
    """Axial (q, r) coordinates of a hexagonal board, row by row."""
    coordinates = []
    for r in range(-radius, radius + 1):
        for q in range(max(-radius, -r - radius), min(radius, -r + radius) + 1):
            coordinates.append((q, r))
    return coordinates


def standard_tiles(rng: random.Random | None = None) -> list[TileSpec]:
    """The 19-tile base layout.

    Without ``rng`` the fixed beginner arrangement is returned. With ``rng``
    tile types and number tokens are shuffled independently.
    """
    types = list(STANDARD_TILE_TYPES)
    tokens = list(STANDARD_NUMBER_TOKENS)
    if rng is not None:
        rng.shuffle(types)
        rng.shuffle(tokens)

    token_iter = iter(tokens)
    specs = []
    for (q, r), tile_type in zip(axial_coordinates(2), types, strict=True):
        value = None if tile_type == TileType.DESERT else next(token_iter)
        specs.append(TileSpec(type=tile_type, value=value, q=q, r=r))
    return specs


def _point_key(point: tuple[float, float]) -> tuple[float, float]:
    # Neighbouring tiles compute shared corners with float noise
    return round(point[0], 2), round(point[1], 2)


def build_board(specs: list[TileSpec]) -> BoardGraph:
    """Build the board graph for the given tiles.

    Corners shared by neighbouring tiles are merged, as are shared edges.
    Ids are assigned in discovery order, so the same tile list always yields
    the same ids.

    Raises:
        ValueError: If two tiles share coordinates, or a tile's number does
            not match its type (the desert has no number, resources need one).
    """
    seen_coordinates: set[tuple[int, int]] = set()
    corner_ids: dict[tuple[float, float], int] = {}
    edge_ids: dict[tuple[int, int], int] = {}
    corners: list[Corner] = []
    edges: list[Edge] = []
    tiles: list[Tile] = []

    for tile_id, spec in enumerate(specs):
        if (spec.q, spec.r) in seen_coordinates:
            raise ValueError(f"Duplicate tile coordinates: ({spec.q}, {spec.r})")
        seen_coordinates.add((spec.q, spec.r))

        if spec.type == TileType.DESERT and spec.value is not None:
            raise ValueError("Desert tiles cannot have a number")
        if spec.type != TileType.DESERT and spec.value is None:
            raise ValueError(f"Resource tile at ({spec.q}, {spec.r}) needs a number")

        tile_corner_ids: list[int] = []
        for point in tile_corner_points(spec.q, spec.r):
            key = _point_key(point)
            corner_id = corner_ids.get(key)
            if corner_id is None:
                corner_id = len(corners)
                corner_ids[key] = corner_id
                corners.append(Corner(id=corner_id))
            corners[corner_id].tiles.append(tile_id)
            tile_corner_ids.append(corner_id)

        for i, a in enumerate(tile_corner_ids):
            b = tile_corner_ids[(i + 1) % 6]
            key = (min(a, b), max(a, b))
            if key in edge_ids:
                continue
            edge_id = len(edges)
            edge_ids[key] = edge_id
            edges.append(Edge(id=edge_id, corners=key))
            corners[a].edges.append(edge_id)
            corners[b].edges.append(edge_id)
            corners[a].corners.append(b)
            corners[b].corners.append(a)

        tiles.append(
            Tile(
                id=tile_id,
                type=spec.type,
                value=spec.value,
                q=spec.q,
                r=spec.r,
                corners=tile_corner_ids,
            )
        )

    # Tiles sharing an edge are neighbours
    for a, b in edge_ids:
        shared = sorted(set(corners[a].tiles) & set(corners[b].tiles))
        if len(shared) == 2:
            first, second = shared
            tiles[first].tiles.append(second)
            tiles[second].tiles.append(first)

    logger.debug(
        "Built board: tiles=%d, corners=%d, edges=%d",
        len(tiles),
        len(corners),
        len(edges),
    )
    return BoardGraph(corners=corners, edges=edges, tiles=tiles)
