"""
CombatSession - one play session of the recoil shooter
-------------------------------------------------------
Owns the player, enemies and projectiles and runs the fixed tick order:

1. skip everything unless the phase is Playing
2. weapon input and recoil movement of the player
3. projectiles: move, expire, collide
4. enemies: pursue / attack, then contact damage on first touch
5. wave director
6. score and death bookkeeping

Gameplay time only advances while Playing, so every timer freezes on pause.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from itertools import chain
from typing import List, Optional, Sequence, Set, Tuple

from .config import SessionConfig
from .damage import DamageModel
from .enemy import EnemyAgent
from .entities import Enemy, Obstacle, Player, HealthState
from .events import (
    Event, EventQueue, GameOver, GamePaused, HealthChanged, ScoreAwarded, ScoreChanged,
)
from .inputs import InputFrame
from .physics import integrate_body, overlapping
from .projectiles import Projectile
from .waves import SpawnPositionPolicy, WaveDirector
from .weapon import ChargeWeapon

logger = logging.getLogger(__name__)


class SessionPhase(Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class SessionState:
    score: int = 0
    high_score: int = 0
    phase: SessionPhase = SessionPhase.NOT_STARTED
    time: float = 0.0  # gameplay seconds, frozen outside Playing


class CombatSession:
    """Composes the damage model, weapon, enemy agent and wave director"""

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        high_score_store=None,
        seed: Optional[int] = None,
        obstacles: Sequence[Tuple[float, float, float]] = (),
    ):
        self.config = (config or SessionConfig()).validate()
        self.high_score_store = high_score_store
        self.seed = seed
        self.obstacle_layout = list(obstacles)
        self.events = EventQueue()

        high_score = high_score_store.load() if high_score_store is not None else 0
        self._build(high_score)

    def _build(self, high_score: int):
        cfg = self.config
        self.state = SessionState(high_score=high_score)
        self.rng = random.Random(self.seed)

        self.damage = DamageModel(self.events)

        pc = cfg.player
        cx, cy = cfg.play_area.center
        self.player = Player(
            x=cx, y=cy,
            radius=pc.radius,
            health=HealthState.full(pc.max_health, pc.invulnerability_duration),
            mass=pc.mass,
            drag=pc.drag,
            max_speed=pc.max_speed,
        )

        self.weapon = ChargeWeapon(cfg.weapon, self.events)

        self.enemy_agent = EnemyAgent(cfg.enemy, self.damage, self.events)
        policy = SpawnPositionPolicy(
            self.rng,
            points=cfg.waves.spawn_points,
            area=cfg.play_area,
            edge_margin=cfg.waves.edge_margin,
        )
        self.waves = WaveDirector(cfg.waves, policy, self.enemy_agent.create, self.events)

        self.enemies: List[Enemy] = []
        self.projectiles: List[Projectile] = []
        self.obstacles: List[Obstacle] = [
            Obstacle(x=x, y=y, radius=r) for x, y, r in self.obstacle_layout
        ]
        # Enemies overlapping the player last tick; contact damage lands on first touch
        self.touching: Set[int] = set()

    # ----------------------------
    # State
    # ----------------------------

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def high_score(self) -> int:
        return self.state.high_score

    @property
    def time(self) -> float:
        return self.state.time

    @property
    def live_enemies(self) -> List[Enemy]:
        return [e for e in self.enemies if e.alive]

    # ----------------------------
    # Phase transitions
    # ----------------------------

    def start(self) -> bool:
        if self.state.phase is not SessionPhase.NOT_STARTED:
            return False
        self.state.phase = SessionPhase.PLAYING
        h = self.player.health
        self.events.emit(HealthChanged(self.player.id, h.current, h.max))
        self.events.emit(ScoreChanged(self.state.score))
        self.waves.start_wave(1)
        return True

    def pause(self) -> bool:
        if self.state.phase is not SessionPhase.PLAYING:
            return False
        self.state.phase = SessionPhase.PAUSED
        self.events.emit(GamePaused(True))
        return True

    def resume(self) -> bool:
        if self.state.phase is not SessionPhase.PAUSED:
            return False
        self.state.phase = SessionPhase.PLAYING
        self.events.emit(GamePaused(False))
        return True

    def toggle_pause(self) -> bool:
        if self.state.phase is SessionPhase.PAUSED:
            return self.resume()
        return self.pause()

    def restart(self):
        """Discard the whole session state and start again; the high score carries over"""
        self._record_high_score()
        self.events.clear()
        self._build(self.state.high_score)
        self.start()

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, dt: float, frame: Optional[InputFrame] = None) -> List[Event]:
        """Advance the session by dt seconds; returns the events emitted this tick"""
        frame = frame or InputFrame()
        phase = self.state.phase
        if phase is SessionPhase.NOT_STARTED or phase is SessionPhase.GAME_OVER:
            return self.events.drain()

        if frame.pause_toggled:
            self._guarded("Pause toggle", self.toggle_pause)

        if self.state.phase is not SessionPhase.PLAYING:
            if frame.fire_released:
                self._guarded("Charge cancel", self.weapon.cancel)
            return self.events.drain()

        self.state.time += dt
        now = self.state.time

        self._step_player(frame, dt)
        self._step_projectiles(dt, now)
        self._guarded("Reap", self._reap)
        self._step_enemies(dt, now)
        self._guarded("Contact damage", self._resolve_contacts, now)
        self._guarded("Reap", self._reap)
        self._step_waves(dt)
        self._guarded("Score bookkeeping", self._settle)
        return self.events.drain()

    def _guarded(self, what: str, step, *args):
        try:
            step(*args)
        except Exception:
            logger.exception("%s failed", what)

    def _step_player(self, frame: InputFrame, dt: float):
        try:
            self.projectiles.extend(self.weapon.update(frame, self.player, dt))
            integrate_body(self.player, dt, self.config.play_area)
        except Exception:
            logger.exception("Player update failed")

    def _step_projectiles(self, dt: float, now: float):
        area = self.config.play_area
        for p in self.projectiles:
            try:
                p.advance(dt)
                if not p.alive:
                    continue
                if not area.contains(p.x, p.y, margin=p.radius):
                    # Left the play area: the boundary acts as a wall
                    p.destroy()
                    continue
                for other in overlapping(p, chain(self.enemies, self.obstacles), ignore=p.ignore):
                    p.on_collision(other, self.damage, now)
                    if isinstance(other, Enemy) and other.health.is_dead:
                        self.enemy_agent.handle_death(other)
                    if not p.alive:
                        break
            except Exception:
                logger.exception("Projectile %d update failed", p.id)

    def _step_enemies(self, dt: float, now: float):
        target = self.player if not self.player.health.is_dead else None
        for enemy in self.enemies:
            try:
                self.enemy_agent.update(enemy, target, now, dt)
            except Exception:
                logger.exception("Enemy %d update failed", enemy.id)

    def _resolve_contacts(self, now: float):
        contact = self.config.player.contact_damage
        if contact <= 0 or self.player.health.is_dead:
            self.touching.clear()
            return
        touching = set()
        for enemy in overlapping(self.player, self.enemies):
            touching.add(enemy.id)
            if enemy.id not in self.touching:
                self.damage.apply_damage(self.player, contact, now)
        self.touching = touching

    def _step_waves(self, dt: float):
        try:
            self.enemies.extend(self.waves.update(dt, len(self.live_enemies)))
        except Exception:
            logger.exception("Wave director update failed")

    def _reap(self):
        for enemy in self.enemies:
            if enemy.alive and enemy.health.is_dead:
                self.enemy_agent.handle_death(enemy)
        self.enemies = [e for e in self.enemies if e.alive]
        self.projectiles = [p for p in self.projectiles if p.alive]

    def _settle(self):
        awarded = sum(e.value for e in self.events.pending(ScoreAwarded))
        if awarded:
            self.state.score += awarded
            self.events.emit(ScoreChanged(self.state.score))

        if self.player.health.is_dead:
            self._enter_game_over()

    def _enter_game_over(self):
        if self.state.phase is SessionPhase.GAME_OVER:
            return
        self.state.phase = SessionPhase.GAME_OVER

        self.player.stop()
        for entity in chain(self.enemies, self.projectiles):
            entity.stop()

        self._record_high_score()

        self.events.emit(GameOver(self.state.score, self.state.high_score))
        logger.info("Game over! Final score: %d (high score %d)",
                    self.state.score, self.state.high_score)

    def _record_high_score(self):
        if self.state.score <= self.state.high_score:
            return
        self.state.high_score = self.state.score
        if self.high_score_store is not None:
            self.high_score_store.save(self.state.high_score)
