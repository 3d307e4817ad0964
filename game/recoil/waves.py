"""
Wave director: paces enemy creation into escalating waves
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .config import WaveConfig, PlayArea
from .entities import Enemy
from .events import EventQueue, WaveStarted, EnemySpawned
from .utils import Vec2

logger = logging.getLogger(__name__)

FALLBACK_SPAWN_RADIUS = 5.0


class WavePhase(Enum):
    SPAWNING = "spawning"
    WAITING = "waiting"


@dataclass
class WaveState:
    wave_number: int = 1
    enemies_spawned_this_wave: int = 0
    enemies_to_spawn_this_wave: int = 0
    inter_wave_timer: float = 0.0
    spawn_timer: float = 0.0  # time until the next spawn is allowed

    @property
    def phase(self) -> WavePhase:
        if self.enemies_spawned_this_wave < self.enemies_to_spawn_this_wave:
            return WavePhase.SPAWNING
        return WavePhase.WAITING


def enemies_for_wave(n: int, base: int, multiplier: float) -> int:
    return int(round(base * multiplier ** (n - 1)))


class SpawnPositionPolicy:
    """
    Picks spawn positions: explicit points if any, else a uniformly random
    spot along the top edge of the play area, else a ring around the origin.
    """

    def __init__(self, rng: random.Random, points: Sequence[Vec2] = (),
                 area: Optional[PlayArea] = None, edge_margin: float = 0.0):
        self.rng = rng
        self.points = list(points)
        self.area = area
        self.edge_margin = edge_margin

    def choose(self) -> Vec2:
        if self.points:
            x, y = self.rng.choice(self.points)
            return float(x), float(y)
        if self.area is not None:
            a, m = self.area, self.edge_margin
            return self.rng.uniform(a.left + m, a.right - m), a.top
        ang = self.rng.uniform(0.0, 2 * math.pi)
        return math.cos(ang) * FALLBACK_SPAWN_RADIUS, math.sin(ang) * FALLBACK_SPAWN_RADIUS


class WaveDirector:

    def __init__(self, config: WaveConfig, spawn_policy: SpawnPositionPolicy,
                 enemy_factory: Callable[[float, float], Enemy], events: EventQueue):
        self.config = config
        self.spawn_policy = spawn_policy
        self.enemy_factory = enemy_factory
        self.events = events
        self.state = WaveState()

    @property
    def phase(self) -> WavePhase:
        return self.state.phase

    @property
    def wave_number(self) -> int:
        return self.state.wave_number

    def start_wave(self, n: int):
        c = self.config
        s = self.state
        s.wave_number = n
        s.enemies_spawned_this_wave = 0
        s.enemies_to_spawn_this_wave = enemies_for_wave(n, c.base_enemies_per_wave, c.wave_multiplier)
        s.spawn_timer = 0.0
        if s.enemies_to_spawn_this_wave == 0:
            s.inter_wave_timer = c.time_between_waves

        self.events.emit(WaveStarted(n, s.enemies_to_spawn_this_wave))
        logger.info("Starting wave %d with %d enemies", n, s.enemies_to_spawn_this_wave)

    def update(self, dt: float, live_enemy_count: int) -> List[Enemy]:
        """Advance pacing by dt; returns enemies created this tick"""
        s = self.state
        spawned: List[Enemy] = []

        if s.phase is WavePhase.SPAWNING:
            s.spawn_timer -= dt
            if s.spawn_timer <= 0:
                spawned.append(self._spawn_one())
                s.spawn_timer = self.config.enemy_spawn_delay
                if s.phase is WavePhase.WAITING:
                    s.inter_wave_timer = self.config.time_between_waves
            return spawned

        # Waiting: the break only counts down once the wave is cleared
        if live_enemy_count > 0:
            return spawned
        s.inter_wave_timer -= dt
        if s.inter_wave_timer <= 0:
            self.start_wave(s.wave_number + 1)
        return spawned

    def _spawn_one(self) -> Enemy:
        x, y = self.spawn_policy.choose()
        enemy = self.enemy_factory(x, y)
        self.state.enemies_spawned_this_wave += 1
        self.events.emit(EnemySpawned(enemy.id, (x, y)))
        return enemy
