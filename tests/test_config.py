"""Tests for config loading and validation."""
from __future__ import annotations

import pytest

from game.recoil.config import ConfigError, PlayArea, SessionConfig, WaveConfig


def test_defaults_are_valid():
    SessionConfig().validate()


def test_from_dict_builds_sections():
    config = SessionConfig.from_dict({
        "weapon": {"max_charge_time": 1.5},
        "waves": {"spawn_points": [[1, 2], [3, 4]]},
        "play_area": {"right": 1024.0, "top": 768.0},
    })

    assert config.weapon.max_charge_time == 1.5
    assert config.waves.spawn_points == ((1, 2), (3, 4))
    assert config.play_area.center == (512.0, 384.0)
    assert config.enemy.attack_range == 40.0


def test_follow_range_must_cover_attack_range():
    config = SessionConfig.from_dict({"enemy": {"attack_range": 50.0, "follow_range": 20.0}})
    with pytest.raises(ConfigError):
        config.validate()


def test_degenerate_play_area_rejected():
    config = SessionConfig(play_area=PlayArea(right=30.0), waves=WaveConfig(edge_margin=20.0))
    with pytest.raises(ConfigError):
        config.validate()


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)
