"""Hex geometry constants for pointy-top tiles."""

import math

CIRCUMRADIUS = 100
APOTHEM = math.sqrt(CIRCUMRADIUS**2 - (CIRCUMRADIUS / 2) ** 2)


def tile_center(q: int, r: int) -> tuple[float, float]:
    """Pixel center of the tile at axial coordinates (q, r)."""
    return APOTHEM * (2 * q + r), 1.5 * CIRCUMRADIUS * r


def tile_corner_points(q: int, r: int) -> list[tuple[float, float]]:
    """The six corner points of a tile, clockwise from the top-right corner."""
    cx, cy = tile_center(q, r)
    points = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        points.append((cx + CIRCUMRADIUS * math.cos(angle), cy + CIRCUMRADIUS * math.sin(angle)))
    return points
