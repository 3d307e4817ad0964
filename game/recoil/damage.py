"""
Health, damage and invulnerability rules shared by the player and enemies
"""

from __future__ import annotations

import logging
from typing import Optional

from .entities import Entity, HealthState
from .events import EventQueue, HealthChanged, DamageTaken, Death

logger = logging.getLogger(__name__)


def _health_of(entity: Entity) -> Optional[HealthState]:
    return getattr(entity, "health", None)


class DamageModel:
    """
    Applies damage and healing to entities carrying a HealthState.

    Every successful change emits HealthChanged; the killing blow additionally
    emits DamageTaken and a single Death. Calls against dead, destroyed or
    invulnerable entities are silent no-ops.
    """

    def __init__(self, events: EventQueue):
        self.events = events

    def is_invulnerable(self, entity: Entity, now: float) -> bool:
        health = _health_of(entity)
        if health is None:
            return False
        return now < health.invulnerable_until

    def apply_damage(self, entity: Entity, amount: int, now: float) -> bool:
        """Returns True if the damage was applied."""
        health = _health_of(entity)
        if health is None or not entity.alive or health.is_dead:
            return False
        if amount <= 0 or self.is_invulnerable(entity, now):
            return False

        health.current = max(0, health.current - amount)
        self.events.emit(DamageTaken(entity.id, amount))
        self.events.emit(HealthChanged(entity.id, health.current, health.max))

        if health.current == 0:
            logger.debug("entity %d died", entity.id)
            self.events.emit(Death(entity.id))
        elif health.invulnerability_duration > 0:
            health.invulnerable_until = now + health.invulnerability_duration
        return True

    def heal(self, entity: Entity, amount: int) -> bool:
        health = _health_of(entity)
        if health is None or not entity.alive or health.is_dead or amount <= 0:
            return False
        health.current = min(health.max, health.current + amount)
        self.events.emit(HealthChanged(entity.id, health.current, health.max))
        return True
