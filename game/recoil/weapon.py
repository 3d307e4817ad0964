"""
Charge weapon: held trigger time scales bullet count, spread, speed and recoil
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .config import WeaponConfig
from .entities import Player
from .events import EventQueue, ChargeStarted, ChargeCancelled, ShotFired
from .inputs import InputFrame
from .physics import apply_impulse
from .projectiles import Projectile, ProjectileSpec
from .utils import clamp, lerp, normalize, rotate_deg, Vec2

logger = logging.getLogger(__name__)


class WeaponState(Enum):
    IDLE = "idle"
    CHARGING = "charging"


@dataclass
class ChargeState:
    is_charging: bool = False
    charge_elapsed: float = 0.0


@dataclass(frozen=True)
class ShotPlan:
    """Shot properties derived from a charge fraction"""
    charge_fraction: float
    bullet_count: int
    spread: float  # degrees, full cone
    speed: float
    recoil: float


def spread_angles(count: int, spread: float) -> List[float]:
    """Evenly spaced offsets across [-spread/2, +spread/2]; one bullet flies straight"""
    if count <= 1:
        return [0.0] * count
    return [lerp(-spread / 2.0, spread / 2.0, i / (count - 1)) for i in range(count)]


class ChargeWeapon:
    """
    Two-state machine (Idle, Charging) driven by trigger edges.

    Pressing opens a charge and kicks the firer back with half the base
    recoil. Holding accumulates charge up to max_charge_time. Releasing
    fires if the charge reached minimum_fire_threshold.
    """

    def __init__(self, config: WeaponConfig, events: EventQueue):
        self.config = config
        self.events = events
        self.charge = ChargeState()

    @property
    def state(self) -> WeaponState:
        return WeaponState.CHARGING if self.charge.is_charging else WeaponState.IDLE

    @property
    def charge_fraction(self) -> float:
        return clamp(self.charge.charge_elapsed / self.config.max_charge_time, 0.0, 1.0)

    def plan_shot(self, charge_fraction: float) -> ShotPlan:
        c = self.config
        t = clamp(charge_fraction, 0.0, 1.0)
        return ShotPlan(
            charge_fraction=t,
            bullet_count=int(round(lerp(c.base_bullet_count, c.max_bullet_count, t))),
            spread=lerp(c.base_spread, c.max_spread, t),
            speed=lerp(c.base_speed, c.max_speed, t),
            recoil=c.base_recoil + t * (c.charged_recoil_multiplier * c.base_recoil),
        )

    # ----------------------------
    # Transitions
    # ----------------------------

    def update(self, frame: InputFrame, firer: Player, dt: float) -> List[Projectile]:
        """Handle one tick of trigger input; returns newly spawned projectiles"""
        spawned: List[Projectile] = []
        if frame.fire_pressed and not self.charge.is_charging:
            self.press(firer, frame.aim)
        if frame.fire_held and self.charge.is_charging:
            self.hold(dt)
        if frame.fire_released and self.charge.is_charging:
            spawned = self.release(firer, frame.aim)
        return spawned

    def press(self, firer: Player, aim: Vec2):
        self.charge.is_charging = True
        self.charge.charge_elapsed = 0.0

        ax, ay = normalize(*aim)
        if (ax, ay) != (0.0, 0.0):
            kick = 0.5 * self.config.base_recoil
            apply_impulse(firer, -ax * kick, -ay * kick)
        self.events.emit(ChargeStarted())

    def hold(self, dt: float):
        if not self.charge.is_charging:
            return
        self.charge.charge_elapsed = clamp(
            self.charge.charge_elapsed + dt, 0.0, self.config.max_charge_time
        )

    def release(self, firer: Player, aim: Vec2) -> List[Projectile]:
        if not self.charge.is_charging:
            return []
        elapsed = self.charge.charge_elapsed
        self.charge.is_charging = False
        self.charge.charge_elapsed = 0.0

        ax, ay = normalize(*aim)
        if elapsed < self.config.minimum_fire_threshold or (ax, ay) == (0.0, 0.0):
            self.events.emit(ChargeCancelled(elapsed))
            return []

        plan = self.plan_shot(elapsed / self.config.max_charge_time)
        apply_impulse(firer, -ax * plan.recoil, -ay * plan.recoil)
        projectiles = self._spawn(firer, (ax, ay), plan)

        self.events.emit(ShotFired(plan.charge_fraction, plan.bullet_count, plan.recoil))
        logger.debug("Fired: charge %.2f, bullets %d, recoil %.1f",
                     plan.charge_fraction, plan.bullet_count, plan.recoil)
        return projectiles

    def cancel(self):
        """Drop an open charge without firing (release seen while suppressed)"""
        if not self.charge.is_charging:
            return
        elapsed = self.charge.charge_elapsed
        self.charge.is_charging = False
        self.charge.charge_elapsed = 0.0
        self.events.emit(ChargeCancelled(elapsed))

    def _spawn(self, firer: Player, aim: Tuple[float, float], plan: ShotPlan) -> List[Projectile]:
        c = self.config
        mx = firer.x + aim[0] * c.muzzle_offset
        my = firer.y + aim[1] * c.muzzle_offset
        projectiles = []
        for offset in spread_angles(plan.bullet_count, plan.spread):
            direction = rotate_deg(aim[0], aim[1], offset)
            spec = ProjectileSpec(direction=direction, speed=plan.speed,
                                  damage=c.bullet_damage, ttl=c.bullet_ttl)
            projectiles.append(Projectile.spawn(
                spec, mx, my, owner=firer,
                radius=c.bullet_radius, destroy_on_hit=c.destroy_on_hit,
            ))
        return projectiles
