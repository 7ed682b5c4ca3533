"""Board adjacency model - corners, edges and tiles.

The board is an arena of nodes addressed by integer index. Adjacency is stored
as index lists computed once when the board is built; afterwards only the
ownership and building attributes of corners and edges change.
"""

from collections.abc import Sequence
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class TileType(str, Enum):
    BRICK = "brick"
    GRAIN = "grain"
    LUMBER = "lumber"
    ORE = "ore"
    WOOL = "wool"
    DESERT = "desert"


RESOURCE_TYPES: tuple[TileType, ...] = (
    TileType.BRICK,
    TileType.GRAIN,
    TileType.LUMBER,
    TileType.ORE,
    TileType.WOOL,
)


class BoardLookupError(LookupError):
    """Raised when a corner, edge or tile id does not exist on the board."""

    def __init__(self, kind: str, node_id: Any) -> None:
        super().__init__(f"No {kind} with id {node_id!r}")
        self.kind = kind
        self.node_id = node_id


class Corner(BaseModel):
    """Board vertex where settlements and cities are built."""

    id: int
    owner: UUID | None = None
    settlement: bool = False
    city: bool = False
    edges: list[int] = Field(default_factory=list)
    tiles: list[int] = Field(default_factory=list)
    corners: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_city_has_settlement(self) -> "Corner":
        if self.city and not self.settlement:
            raise ValueError("A city can only stand on a settlement")
        return self


class Edge(BaseModel):
    """Connector between two corners where roads are built."""

    id: int
    owner: UUID | None = None
    corners: tuple[int, int]


class Tile(BaseModel):
    """Hex producing one resource when its number is rolled."""

    id: int
    type: TileType
    value: int | None = Field(None, ge=2, le=12)
    q: int = 0
    r: int = 0
    corners: list[int] = Field(default_factory=list)
    tiles: list[int] = Field(default_factory=list)

    @property
    def is_resource(self) -> bool:
        return self.type != TileType.DESERT


NodeT = TypeVar("NodeT", Corner, Edge, Tile)


def _query(nodes: Sequence[NodeT], fields: dict[str, Any]) -> list[NodeT]:
    return [
        node
        for node in nodes
        if all(getattr(node, name) == value for name, value in fields.items())
    ]


def _lookup(nodes: Sequence[NodeT], kind: str, node_id: int) -> NodeT:
    if isinstance(node_id, bool) or not isinstance(node_id, int):
        raise BoardLookupError(kind, node_id)
    if node_id < 0 or node_id >= len(nodes):
        raise BoardLookupError(kind, node_id)
    return nodes[node_id]


class BoardGraph(BaseModel):
    """Corners, edges and tiles with precomputed adjacency.

    Each node's ``id`` equals its index in the owning list, so lookups and
    neighbour accessors are constant time per neighbour.
    """

    corners: list[Corner]
    edges: list[Edge]
    tiles: list[Tile]

    # Lookups

    def get_corner(self, corner_id: int) -> Corner:
        return _lookup(self.corners, "corner", corner_id)

    def get_edge(self, edge_id: int) -> Edge:
        return _lookup(self.edges, "edge", edge_id)

    def get_tile(self, tile_id: int) -> Tile:
        return _lookup(self.tiles, "tile", tile_id)

    # Queries - field equality filters, board order

    def query_corners(self, **fields: Any) -> list[Corner]:
        return _query(self.corners, fields)

    def query_edges(self, **fields: Any) -> list[Edge]:
        return _query(self.edges, fields)

    def query_tiles(self, **fields: Any) -> list[Tile]:
        return _query(self.tiles, fields)

    # Adjacency

    def adjacent_corners(self, node: Corner | Edge | Tile) -> list[Corner]:
        """Corners one edge away from a corner, or the corners of an edge or tile."""
        return [self.corners[i] for i in node.corners]

    def adjacent_edges(self, corner: Corner) -> list[Edge]:
        return [self.edges[i] for i in corner.edges]

    def adjacent_tiles(self, node: Corner | Tile) -> list[Tile]:
        """Tiles touching a corner, or the tiles sharing an edge with a tile."""
        return [self.tiles[i] for i in node.tiles]

    # Derived buildability, always read from current ownership

    def is_corner_buildable(self, corner: Corner) -> bool:
        """A corner is buildable when it and every neighbouring corner are unowned."""
        if corner.owner is not None:
            return False
        return all(neighbour.owner is None for neighbour in self.adjacent_corners(corner))

    def is_edge_buildable(self, edge: Edge) -> bool:
        return edge.owner is None
