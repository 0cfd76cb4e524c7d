"""Grid geometry and randomized placement."""

import random
from typing import Iterable, Optional

from .constants import DIRECTIONS, MAX_PLACEMENT_ATTEMPTS, OPPOSITES
from .models import Direction, Point


def points_equal(a: Point, b: Point) -> bool:
    return a.x == b.x and a.y == b.y


def point_in(point: Point, points: Iterable[Point]) -> bool:
    return any(points_equal(point, p) for p in points)


def opposite_direction(direction: Direction) -> Direction:
    return Direction(OPPOSITES[direction])


def step(point: Point, direction: Direction) -> Point:
    dx, dy = DIRECTIONS[direction]
    return Point(point.x + dx, point.y + dy)


def random_point(
    max_x: int,
    max_y: int,
    exclude: Iterable[Point] = (),
    rng: Optional[random.Random] = None,
) -> Point:
    """Draw a cell in [0, max_x) x [0, max_y) that avoids `exclude`.

    Gives up after MAX_PLACEMENT_ATTEMPTS draws and returns the last one even
    if it collides, so a nearly full board can still place something.
    """
    rng = rng or random
    blocked = set(exclude)
    attempts = 0
    while True:
        point = Point(rng.randrange(max_x), rng.randrange(max_y))
        attempts += 1
        if point not in blocked or attempts >= MAX_PLACEMENT_ATTEMPTS:
            return point
