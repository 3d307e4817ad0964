"""
Enemy behaviour: pursue the target, stop and attack once in range
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import EnemyConfig
from .damage import DamageModel
from .entities import Enemy, EnemyAIState, Entity, HealthState
from .events import EventQueue, ScoreAwarded
from .utils import angle_deg, distance, normalize

logger = logging.getLogger(__name__)


class EnemyAgent:
    """
    Drives every Enemy with the same tuning.

    Per-enemy state (AI state, next attack time) lives on the Enemy
    dataclass; this class holds the rules.
    """

    def __init__(self, config: EnemyConfig, damage_model: DamageModel, events: EventQueue):
        self.config = config
        self.damage_model = damage_model
        self.events = events

    def create(self, x: float, y: float) -> Enemy:
        c = self.config
        return Enemy(
            x=x, y=y,
            radius=c.radius,
            health=HealthState.full(c.max_health, c.invulnerability_duration),
        )

    def update(self, enemy: Enemy, target: Optional[Entity], now: float, dt: float):
        if not enemy.alive:
            return

        if target is None or not target.alive:
            # Nothing to chase: idle in place
            enemy.state = EnemyAIState.PURSUING
            enemy.stop()
            return

        dist = distance(enemy.position, target.position)
        c = self.config

        if dist > c.attack_range:
            enemy.state = EnemyAIState.PURSUING
            if c.follow_range is not None and dist > c.follow_range:
                enemy.stop()
            else:
                nx, ny = normalize(target.x - enemy.x, target.y - enemy.y)
                enemy.vx = nx * c.move_speed
                enemy.vy = ny * c.move_speed
        else:
            enemy.state = EnemyAIState.ATTACKING
            enemy.stop()
            if now >= enemy.next_attack_allowed_at:
                self.damage_model.apply_damage(target, c.attack_damage, now)
                enemy.next_attack_allowed_at = now + c.attack_cooldown

        enemy.facing = angle_deg(target.x - enemy.x, target.y - enemy.y)

        enemy.x += enemy.vx * dt
        enemy.y += enemy.vy * dt

    def handle_death(self, enemy: Enemy) -> bool:
        """Retire a killed enemy and award its score once. Returns True on the first call."""
        if not enemy.alive or not enemy.health.is_dead:
            return False
        enemy.stop()
        enemy.alive = False
        self.events.emit(ScoreAwarded(enemy.id, self.config.score_value))
        logger.debug("Enemy %d died, awarding %d", enemy.id, self.config.score_value)
        return True
