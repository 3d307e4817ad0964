"""Tests for the wave director and spawn-position policy."""
from __future__ import annotations

import math
import random

import pytest

from game.recoil.config import PlayArea, WaveConfig
from game.recoil.entities import Enemy
from game.recoil.events import EnemySpawned, EventQueue, WaveStarted
from game.recoil.waves import (
    FALLBACK_SPAWN_RADIUS, SpawnPositionPolicy, WaveDirector, WavePhase, enemies_for_wave,
)


def make_director(points=(), area=None, **overrides):
    config = WaveConfig(**overrides)
    events = EventQueue()
    policy = SpawnPositionPolicy(
        random.Random(1),
        points=points,
        area=area if area is not None else PlayArea(),
        edge_margin=config.edge_margin,
    )
    director = WaveDirector(config, policy, lambda x, y: Enemy(x=x, y=y), events)
    return director, events


def run(director, ticks: int, dt: float, live: int = 0):
    spawned = []
    for _ in range(ticks):
        spawned.extend(director.update(dt, live))
    return spawned


@pytest.mark.parametrize("wave, expected", [(1, 3), (2, 4), (3, 4), (5, 6)])
def test_enemy_count_rounds_compounded_multiplier(wave, expected):
    """round(3 * 1.2 ** (n - 1)): 3, 3.6, 4.32, 6.22."""
    assert enemies_for_wave(wave, 3, 1.2) == expected


def test_start_wave_sets_spawning():
    director, events = make_director(base_enemies_per_wave=3, wave_multiplier=1.2)

    director.start_wave(3)

    s = director.state
    assert s.wave_number == 3
    assert s.enemies_to_spawn_this_wave == 4
    assert s.enemies_spawned_this_wave == 0
    assert director.phase is WavePhase.SPAWNING
    assert events.drain() == [WaveStarted(3, 4)]


def test_spawns_follow_cadence():
    """One enemy per enemy_spawn_delay, the first one immediately."""
    director, _ = make_director(base_enemies_per_wave=3, wave_multiplier=1.0,
                                enemy_spawn_delay=1.0, time_between_waves=5.0)
    director.start_wave(1)

    counts = []
    for _ in range(5):
        director.update(0.5, 0)
        counts.append(director.state.enemies_spawned_this_wave)

    assert counts == [1, 1, 2, 2, 3]
    assert director.phase is WavePhase.WAITING
    assert director.state.inter_wave_timer == pytest.approx(5.0)


def test_next_wave_waits_for_clear():
    """The break timer only runs once no enemies are alive."""
    director, events = make_director(base_enemies_per_wave=1, wave_multiplier=1.0,
                                     enemy_spawn_delay=0.0, time_between_waves=1.0)
    director.start_wave(1)
    assert len(director.update(0.1, 0)) == 1
    assert director.phase is WavePhase.WAITING

    run(director, ticks=20, dt=0.5, live=1)
    assert director.wave_number == 1
    assert director.state.inter_wave_timer == pytest.approx(1.0)

    director.update(0.5, 0)
    assert director.wave_number == 1
    events.drain()
    director.update(0.5, 0)

    assert director.wave_number == 2
    assert director.phase is WavePhase.SPAWNING
    assert WaveStarted(2, 1) in events.drain()


def test_spawns_on_top_edge():
    """Without spawn points enemies appear along the top edge, inside the margins."""
    area = PlayArea(0.0, 0.0, 800.0, 600.0)
    director, events = make_director(area=area, base_enemies_per_wave=10,
                                     wave_multiplier=1.0, enemy_spawn_delay=0.0, edge_margin=20.0)
    director.start_wave(1)

    spawned = run(director, ticks=10, dt=0.1)

    assert len(spawned) == 10
    for enemy in spawned:
        assert enemy.y == area.top
        assert 20.0 <= enemy.x <= 780.0
    positions = [e.position for e in events.drain() if isinstance(e, EnemySpawned)]
    assert positions == [e.position for e in spawned]


def test_explicit_spawn_points_win():
    points = ((10.0, 10.0), (20.0, 30.0))
    director, _ = make_director(points=points, base_enemies_per_wave=6,
                                wave_multiplier=1.0, enemy_spawn_delay=0.0)
    director.start_wave(1)

    spawned = run(director, ticks=6, dt=0.1)

    assert {e.position for e in spawned} <= set(points)


def test_fallback_ring_without_area():
    """No points and no play area: spawn on a ring around the origin."""
    policy = SpawnPositionPolicy(random.Random(0))
    for _ in range(5):
        x, y = policy.choose()
        assert math.hypot(x, y) == pytest.approx(FALLBACK_SPAWN_RADIUS)


def test_phase_matches_spawn_counts():
    director, _ = make_director(base_enemies_per_wave=2, wave_multiplier=1.0, enemy_spawn_delay=0.0)
    director.start_wave(1)
    for _ in range(3):
        s = director.state
        spawning = s.enemies_spawned_this_wave < s.enemies_to_spawn_this_wave
        assert (director.phase is WavePhase.SPAWNING) == spawning
        director.update(0.1, 0)
