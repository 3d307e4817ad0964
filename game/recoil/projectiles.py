"""
Projectiles: a fixed payload computed at fire time plus a moving position
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Set, Tuple

from .damage import DamageModel
from .entities import Entity, Category


@dataclass(frozen=True)
class ProjectileSpec:
    direction: Tuple[float, float]  # unit vector
    speed: float
    damage: int
    ttl: float


@dataclass
class Projectile(Entity):
    """Bullet projectile entity"""
    spec: ProjectileSpec = None  # type: ignore
    radius: float = 4.0
    category: Category = Category.PROJECTILE
    ttl: float = 0.0
    destroy_on_hit: bool = True
    owner_id: int = 0
    # Categories this projectile never collides with; set once at spawn
    ignore: FrozenSet[Category] = field(default_factory=frozenset)
    # Ids of entities already hit; a contact only counts once
    hit_ids: Set[int] = field(default_factory=set, compare=False, repr=False)

    @classmethod
    def spawn(cls, spec: ProjectileSpec, x: float, y: float, owner: Entity,
              radius: float = 4.0, destroy_on_hit: bool = True) -> "Projectile":
        dx, dy = spec.direction
        return cls(
            x=x, y=y,
            vx=dx * spec.speed, vy=dy * spec.speed,
            radius=radius,
            spec=spec,
            ttl=spec.ttl,
            destroy_on_hit=destroy_on_hit,
            owner_id=owner.id,
            ignore=frozenset({owner.category, Category.PROJECTILE}),
        )

    @property
    def damage(self) -> int:
        return self.spec.damage

    def advance(self, dt: float):
        if not self.alive:
            return
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.ttl -= dt
        if self.ttl <= 0:
            self.ttl = 0.0
            self.destroy()

    def on_collision(self, other: Entity, damage_model: DamageModel, now: float) -> bool:
        """Resolve a hit against `other`. Returns True if damage was applied."""
        if not self.alive:
            return False

        if other.category is Category.ENEMY:
            if other.id in self.hit_ids:
                return False
            self.hit_ids.add(other.id)
            applied = damage_model.apply_damage(other, self.damage, now)
            if self.destroy_on_hit:
                self.destroy()
            return applied

        if other.category in (Category.WALL, Category.OBSTACLE):
            self.destroy()
        return False

    def destroy(self):
        self.alive = False
        self.stop()
