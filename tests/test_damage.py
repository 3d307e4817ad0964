"""Tests for DamageModel: damage, healing, invulnerability and death."""
from __future__ import annotations

import pytest

from game.recoil.damage import DamageModel
from game.recoil.entities import Enemy, HealthState, Player
from game.recoil.events import DamageTaken, Death, EventQueue, HealthChanged


def make_model():
    events = EventQueue()
    return DamageModel(events), events


def make_player(max_health: int = 5, invulnerability: float = 1.0) -> Player:
    return Player(health=HealthState.full(max_health, invulnerability))


def test_damage_reduces_health_and_notifies():
    """A hit lowers health and emits damage-taken and health-changed."""
    model, events = make_model()
    player = make_player()

    assert model.apply_damage(player, 1, now=0.0)

    assert player.health.current == 4
    emitted = events.drain()
    assert DamageTaken(player.id, 1) in emitted
    assert HealthChanged(player.id, 4, 5) in emitted


def test_invulnerability_window_sequence():
    """Hits spaced past the window land; a hit inside the window is ignored."""
    model, _ = make_model()
    player = make_player(max_health=5, invulnerability=1.0)
    history = [player.health.current]

    for now in (0.0, 1.0, 2.5):
        assert model.apply_damage(player, 1, now)
        history.append(player.health.current)

    assert history == [5, 4, 3, 2]
    assert model.is_invulnerable(player, 3.0)
    assert not model.apply_damage(player, 1, now=3.0)
    assert player.health.current == 2


def test_enemies_have_no_invulnerability_by_default():
    """Zero-duration window means back-to-back hits all land."""
    model, _ = make_model()
    enemy = Enemy(health=HealthState.full(3))

    model.apply_damage(enemy, 1, now=0.0)
    model.apply_damage(enemy, 1, now=0.0)

    assert enemy.health.current == 1
    assert not model.is_invulnerable(enemy, 0.0)


@pytest.mark.parametrize("amount", [0, 1, 2, 4, 5, 6, 100])
def test_health_stays_in_range(amount):
    """Health never leaves [0, max] for any non-negative hit."""
    model, _ = make_model()
    player = make_player(max_health=5)

    model.apply_damage(player, amount, now=0.0)

    assert 0 <= player.health.current <= player.health.max


def test_death_fires_once():
    """Overkill clamps to zero and emits exactly one death; later hits are no-ops."""
    model, events = make_model()
    enemy = Enemy(health=HealthState.full(3))

    assert model.apply_damage(enemy, 10, now=0.0)
    assert enemy.health.current == 0
    assert enemy.health.is_dead

    assert not model.apply_damage(enemy, 1, now=5.0)
    assert not model.heal(enemy, 3)

    deaths = [e for e in events.drain() if isinstance(e, Death)]
    assert deaths == [Death(enemy.id)]
    assert enemy.health.current == 0


def test_killing_blow_opens_no_window():
    """Invulnerability only opens when the entity survives the hit."""
    model, _ = make_model()
    player = make_player(max_health=1)

    model.apply_damage(player, 1, now=0.0)

    assert player.health.invulnerable_until == 0.0


def test_heal_caps_at_max_and_keeps_window():
    """Healing never exceeds max and leaves invulnerability untouched."""
    model, events = make_model()
    player = make_player(max_health=5)
    model.apply_damage(player, 2, now=0.0)
    until = player.health.invulnerable_until
    events.drain()

    assert model.heal(player, 10)

    assert player.health.current == 5
    assert player.health.invulnerable_until == until
    assert events.drain() == [HealthChanged(player.id, 5, 5)]


def test_destroyed_entity_takes_no_damage():
    """An entity removed from play ignores damage."""
    model, events = make_model()
    enemy = Enemy(health=HealthState.full(3))
    enemy.alive = False

    assert not model.apply_damage(enemy, 1, now=0.0)
    assert enemy.health.current == 3
    assert len(events) == 0


def test_zero_damage_is_a_no_op():
    """A zero hit changes nothing and opens no window."""
    model, events = make_model()
    player = make_player()

    assert not model.apply_damage(player, 0, now=0.0)
    assert not model.is_invulnerable(player, 0.0)
    assert len(events) == 0
