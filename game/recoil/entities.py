"""
Game entity dataclasses
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

_ids = itertools.count(1)


def next_entity_id() -> int:
    return next(_ids)


class Category(Enum):
    """Collision category, fixed when the entity is created"""
    PLAYER = "player"
    ENEMY = "enemy"
    PROJECTILE = "projectile"
    WALL = "wall"
    OBSTACLE = "obstacle"


class EnemyAIState(Enum):
    PURSUING = "pursuing"
    ATTACKING = "attacking"


@dataclass
class HealthState:
    """Health of one damageable entity. Only DamageModel mutates it."""
    current: int
    max: int
    invulnerability_duration: float = 0.0  # seconds; 0 disables the window
    invulnerable_until: float = 0.0

    @classmethod
    def full(cls, max_health: int, invulnerability_duration: float = 0.0) -> "HealthState":
        return cls(current=max_health, max=max_health,
                   invulnerability_duration=invulnerability_duration)

    @property
    def is_dead(self) -> bool:
        return self.current <= 0

    @property
    def fraction(self) -> float:
        return self.current / self.max if self.max > 0 else 0.0


@dataclass
class Entity:
    """Base identity: id, position, velocity, alive flag"""
    id: int = field(default_factory=next_entity_id)
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 1.0
    category: Category = Category.OBSTACLE
    alive: bool = True

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.vx, self.vy

    def stop(self):
        self.vx = 0.0
        self.vy = 0.0


@dataclass
class Player(Entity):
    """Player entity, moved only by recoil impulses"""
    radius: float = 14.0
    category: Category = Category.PLAYER
    health: HealthState = field(default_factory=lambda: HealthState.full(100, 1.0))
    mass: float = 1.0
    drag: float = 2.0
    max_speed: float = 600.0


@dataclass
class Enemy(Entity):
    """Enemy entity that pursues and attacks a target"""
    radius: float = 12.0
    category: Category = Category.ENEMY
    health: HealthState = field(default_factory=lambda: HealthState.full(3))
    state: EnemyAIState = EnemyAIState.PURSUING
    next_attack_allowed_at: float = 0.0
    facing: float = 0.0  # degrees, cosmetic only


@dataclass
class Obstacle(Entity):
    """Static circle that blocks projectiles"""
    radius: float = 20.0
    category: Category = Category.OBSTACLE
