"""Tests for the charge weapon state machine."""
from __future__ import annotations

import math

import pytest

from game.recoil.config import WeaponConfig
from game.recoil.entities import Category, Player
from game.recoil.events import ChargeCancelled, ChargeStarted, EventQueue, ShotFired
from game.recoil.inputs import TriggerTracker
from game.recoil.weapon import ChargeWeapon, WeaponState, spread_angles


def make_weapon(**overrides):
    events = EventQueue()
    return ChargeWeapon(WeaponConfig(**overrides), events), events


def bullet_angle(projectile) -> float:
    dx, dy = projectile.spec.direction
    return math.degrees(math.atan2(dy, dx))


def test_press_starts_charge_with_half_recoil():
    """Pressing opens a charge and kicks the firer back by half the base recoil."""
    weapon, events = make_weapon(base_recoil=100.0)
    player = Player(x=100.0, y=100.0)

    weapon.press(player, (1.0, 0.0))

    assert weapon.state is WeaponState.CHARGING
    assert weapon.charge.charge_elapsed == 0.0
    assert player.vx == pytest.approx(-50.0)
    assert player.vy == pytest.approx(0.0)
    assert events.drain() == [ChargeStarted()]


def test_hold_clamps_to_max_charge():
    """Charge accumulates with dt and stops at max_charge_time."""
    weapon, _ = make_weapon(max_charge_time=2.0)
    weapon.press(Player(), (1.0, 0.0))

    weapon.hold(1.5)
    assert weapon.charge.charge_elapsed == pytest.approx(1.5)
    weapon.hold(1.5)
    assert weapon.charge.charge_elapsed == pytest.approx(2.0)
    assert weapon.charge_fraction == pytest.approx(1.0)


def test_tap_below_threshold_fires_nothing():
    """A short tap spawns nothing and adds no recoil beyond the press kick."""
    weapon, events = make_weapon(base_recoil=100.0, minimum_fire_threshold=0.1)
    player = Player()

    weapon.press(player, (1.0, 0.0))
    weapon.hold(0.05)
    shots = weapon.release(player, (1.0, 0.0))

    assert shots == []
    assert player.vx == pytest.approx(-50.0)
    assert weapon.state is WeaponState.IDLE
    assert weapon.charge.charge_elapsed == 0.0
    emitted = events.drain()
    assert not any(isinstance(e, ShotFired) for e in emitted)
    assert any(isinstance(e, ChargeCancelled) for e in emitted)


def test_plan_at_zero_and_full_charge():
    """t=0 gives the base shot, t=1 the fully charged one."""
    weapon, _ = make_weapon()
    c = weapon.config

    base = weapon.plan_shot(0.0)
    assert base.bullet_count == c.base_bullet_count
    assert base.spread == pytest.approx(c.base_spread)
    assert base.speed == pytest.approx(c.base_speed)
    assert base.recoil == pytest.approx(c.base_recoil)

    full = weapon.plan_shot(1.0)
    assert full.bullet_count == c.max_bullet_count
    assert full.spread == pytest.approx(c.max_spread)
    assert full.speed == pytest.approx(c.max_speed)
    assert full.recoil == pytest.approx(c.base_recoil * (1 + c.charged_recoil_multiplier))


def test_plan_is_monotonic_in_charge():
    """Bullet count, spread and speed never decrease as charge grows."""
    weapon, _ = make_weapon()
    plans = [weapon.plan_shot(i / 20) for i in range(21)]

    for a, b in zip(plans, plans[1:]):
        assert a.bullet_count <= b.bullet_count
        assert a.spread <= b.spread
        assert a.speed <= b.speed
        assert a.recoil <= b.recoil


def test_full_charge_spreads_bullets_evenly():
    """A full charge fires max bullets across the whole cone with equal payloads."""
    weapon, events = make_weapon()
    player = Player(x=400.0, y=300.0)

    weapon.press(player, (1.0, 0.0))
    weapon.hold(10.0)
    shots = weapon.release(player, (1.0, 0.0))

    assert len(shots) == 8
    angles = [bullet_angle(s) for s in shots]
    assert angles[0] == pytest.approx(-22.5)
    assert angles[-1] == pytest.approx(22.5)
    steps = [b - a for a, b in zip(angles, angles[1:])]
    assert all(step == pytest.approx(45.0 / 7) for step in steps)

    assert {s.damage for s in shots} == {weapon.config.bullet_damage}
    assert {s.spec.ttl for s in shots} == {weapon.config.bullet_ttl}
    assert all(s.spec.speed == pytest.approx(600.0) for s in shots)

    # press kick (0.5 x 240) plus full release recoil (240 + 3 x 240)
    assert player.vx == pytest.approx(-120.0 - 960.0)
    assert ShotFired(1.0, 8, 960.0) in events.drain()


def test_single_bullet_flies_straight():
    """With one bullet no spread is applied."""
    weapon, _ = make_weapon(base_bullet_count=1, max_bullet_count=1, base_spread=30.0, max_spread=30.0)
    player = Player()

    weapon.press(player, (0.0, 1.0))
    weapon.hold(0.5)
    shots = weapon.release(player, (0.0, 1.0))

    assert len(shots) == 1
    assert shots[0].spec.direction == pytest.approx((0.0, 1.0))


def test_zero_aim_fires_nothing():
    """Without an aim direction the release spawns nothing and applies no recoil."""
    weapon, events = make_weapon()
    player = Player()

    weapon.press(player, (0.0, 0.0))
    weapon.hold(1.0)
    shots = weapon.release(player, (0.0, 0.0))

    assert shots == []
    assert player.velocity == (0.0, 0.0)
    assert weapon.state is WeaponState.IDLE
    assert not any(isinstance(e, ShotFired) for e in events.drain())


def test_update_follows_trigger_edges():
    """Press, hold and release frames drive the full cycle."""
    weapon, _ = make_weapon(max_charge_time=2.0)
    player = Player(x=400.0, y=300.0)
    trigger = TriggerTracker()
    aim = (1.0, 0.0)

    assert weapon.update(trigger.frame(True, aim), player, 0.5) == []
    assert weapon.state is WeaponState.CHARGING
    assert weapon.update(trigger.frame(True, aim), player, 0.5) == []
    assert weapon.charge.charge_elapsed == pytest.approx(1.0)

    shots = weapon.update(trigger.frame(False, aim), player, 0.5)

    assert len(shots) == weapon.plan_shot(0.5).bullet_count
    assert weapon.state is WeaponState.IDLE


def test_release_without_charge_is_ignored():
    """A release edge while idle does nothing."""
    weapon, events = make_weapon()
    assert weapon.release(Player(), (1.0, 0.0)) == []
    assert len(events) == 0


def test_cancel_drops_charge():
    """Cancelling returns to idle without firing."""
    weapon, events = make_weapon()
    weapon.press(Player(), (1.0, 0.0))
    weapon.hold(1.0)
    events.drain()

    weapon.cancel()

    assert weapon.state is WeaponState.IDLE
    assert events.drain() == [ChargeCancelled(1.0)]


def test_projectiles_ignore_firer_category():
    """Collision exclusion of the firer is fixed when the projectile spawns."""
    weapon, _ = make_weapon()
    player = Player()
    weapon.press(player, (1.0, 0.0))
    weapon.hold(1.0)

    for shot in weapon.release(player, (1.0, 0.0)):
        assert Category.PLAYER in shot.ignore
        assert shot.owner_id == player.id


def test_spread_angles():
    assert spread_angles(1, 40.0) == [0.0]
    assert spread_angles(3, 40.0) == pytest.approx([-20.0, 0.0, 20.0])
