"""
Minimal rigid-body helpers: impulses, drag, speed limit and overlap queries
"""

from __future__ import annotations

from typing import Iterable, Iterator, FrozenSet

from .config import PlayArea
from .entities import Entity, Category, Player
from .utils import clamp, circle_collide, vec_len


def apply_impulse(body: Player, ix: float, iy: float):
    """Instantaneous change of momentum: v += J / m"""
    body.vx += ix / body.mass
    body.vy += iy / body.mass


def limit_speed(body: Player):
    speed = vec_len(body.vx, body.vy)
    if speed > body.max_speed:
        scale = body.max_speed / speed
        body.vx *= scale
        body.vy *= scale


def integrate_body(body: Player, dt: float, area: PlayArea):
    """Advance a recoil-driven body: drag, speed cap, move, stay in bounds"""
    damping = max(0.0, 1.0 - body.drag * dt)
    body.vx *= damping
    body.vy *= damping
    limit_speed(body)

    body.x += body.vx * dt
    body.y += body.vy * dt

    # Keep in bounds, killing the velocity component that hit the edge
    r = body.radius
    nx = clamp(body.x, area.left + r, area.right - r)
    ny = clamp(body.y, area.bottom + r, area.top - r)
    if nx != body.x:
        body.vx = 0.0
    if ny != body.y:
        body.vy = 0.0
    body.x, body.y = nx, ny


def overlaps(a: Entity, b: Entity) -> bool:
    return circle_collide(a.x, a.y, a.radius, b.x, b.y, b.radius)


def overlapping(entity: Entity, others: Iterable[Entity],
                ignore: FrozenSet[Category] = frozenset()) -> Iterator[Entity]:
    """Live entities overlapping `entity`, skipping ignored categories"""
    for other in others:
        if other is entity or not other.alive or other.category in ignore:
            continue
        if overlaps(entity, other):
            yield other
