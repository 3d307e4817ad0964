"""
Gameplay tuning for a combat session

All distances are in world units (pixels, y axis up), times in seconds.
Ranges are checked once, when a CombatSession is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple


class ConfigError(ValueError):
    """Raised for out-of-range gameplay configuration"""


@dataclass
class PlayArea:
    left: float = 0.0
    bottom: float = 0.0
    right: float = 800.0
    top: float = 600.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def center(self) -> Tuple[float, float]:
        return (self.left + self.right) * 0.5, (self.bottom + self.top) * 0.5

    def contains(self, x: float, y: float, margin: float = 0.0) -> bool:
        return (self.left - margin <= x <= self.right + margin
                and self.bottom - margin <= y <= self.top + margin)


@dataclass
class PlayerConfig:
    max_health: int = 10
    invulnerability_duration: float = 1.0
    radius: float = 14.0
    mass: float = 1.0
    drag: float = 2.0
    max_speed: float = 600.0
    contact_damage: int = 0  # 0 disables body-contact damage from enemies


@dataclass
class WeaponConfig:
    base_recoil: float = 240.0
    max_charge_time: float = 2.0
    minimum_fire_threshold: float = 0.1
    charged_recoil_multiplier: float = 3.0
    base_bullet_count: int = 1
    max_bullet_count: int = 8
    base_spread: float = 10.0  # degrees
    max_spread: float = 45.0
    base_speed: float = 480.0
    max_speed: float = 600.0
    bullet_damage: int = 1
    bullet_ttl: float = 3.0
    bullet_radius: float = 4.0
    destroy_on_hit: bool = True
    muzzle_offset: float = 20.0


@dataclass
class EnemyConfig:
    max_health: int = 3
    move_speed: float = 120.0
    attack_range: float = 40.0
    attack_cooldown: float = 1.0
    attack_damage: int = 1
    score_value: int = 10
    radius: float = 12.0
    invulnerability_duration: float = 0.0
    follow_range: Optional[float] = None  # None: always pursue


@dataclass
class WaveConfig:
    base_enemies_per_wave: int = 3
    wave_multiplier: float = 1.2
    enemy_spawn_delay: float = 1.0
    time_between_waves: float = 5.0
    spawn_points: Tuple[Tuple[float, float], ...] = ()
    edge_margin: float = 20.0


@dataclass
class SessionConfig:
    player: PlayerConfig = field(default_factory=PlayerConfig)
    weapon: WeaponConfig = field(default_factory=WeaponConfig)
    enemy: EnemyConfig = field(default_factory=EnemyConfig)
    waves: WaveConfig = field(default_factory=WaveConfig)
    play_area: PlayArea = field(default_factory=PlayArea)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "SessionConfig":
        """Build a config from nested dicts, e.g. {"weapon": {"max_charge_time": 1.5}}"""
        kwargs = {}
        for name, values in data.items():
            if name not in _SECTION_TYPES:
                raise ConfigError(f"Unknown config section: {name}")
            section_cls = _SECTION_TYPES[name]
            allowed = {f.name for f in fields(section_cls)}
            unknown = set(values) - allowed
            if unknown:
                raise ConfigError(f"Unknown keys in '{name}': {sorted(unknown)}")
            values = dict(values)
            if "spawn_points" in values:
                values["spawn_points"] = tuple(tuple(p) for p in values["spawn_points"])
            kwargs[name] = section_cls(**values)
        return cls(**kwargs)

    def validate(self):
        p, w, e, wv, a = self.player, self.weapon, self.enemy, self.waves, self.play_area

        _check(p.max_health >= 1, "player.max_health must be >= 1")
        _check(p.invulnerability_duration >= 0, "player.invulnerability_duration must be >= 0")
        _check(p.radius > 0, "player.radius must be > 0")
        _check(p.mass > 0, "player.mass must be > 0")
        _check(p.drag >= 0, "player.drag must be >= 0")
        _check(p.max_speed > 0, "player.max_speed must be > 0")
        _check(p.contact_damage >= 0, "player.contact_damage must be >= 0")

        _check(w.max_charge_time > 0, "weapon.max_charge_time must be > 0")
        _check(w.minimum_fire_threshold >= 0, "weapon.minimum_fire_threshold must be >= 0")
        _check(w.base_recoil >= 0, "weapon.base_recoil must be >= 0")
        _check(w.charged_recoil_multiplier >= 0, "weapon.charged_recoil_multiplier must be >= 0")
        _check(w.base_bullet_count >= 1, "weapon.base_bullet_count must be >= 1")
        _check(w.max_bullet_count >= w.base_bullet_count,
               "weapon.max_bullet_count must be >= base_bullet_count")
        _check(0 <= w.base_spread <= w.max_spread, "weapon spreads must satisfy 0 <= base <= max")
        _check(0 < w.base_speed <= w.max_speed, "weapon speeds must satisfy 0 < base <= max")
        _check(w.bullet_damage >= 0, "weapon.bullet_damage must be >= 0")
        _check(w.bullet_ttl > 0, "weapon.bullet_ttl must be > 0")
        _check(w.bullet_radius > 0, "weapon.bullet_radius must be > 0")

        _check(e.max_health >= 1, "enemy.max_health must be >= 1")
        _check(e.move_speed >= 0, "enemy.move_speed must be >= 0")
        _check(e.attack_range >= 0, "enemy.attack_range must be >= 0")
        _check(e.attack_cooldown >= 0, "enemy.attack_cooldown must be >= 0")
        _check(e.attack_damage >= 0, "enemy.attack_damage must be >= 0")
        _check(e.score_value >= 0, "enemy.score_value must be >= 0")
        _check(e.radius > 0, "enemy.radius must be > 0")
        _check(e.invulnerability_duration >= 0, "enemy.invulnerability_duration must be >= 0")
        _check(e.follow_range is None or e.follow_range >= e.attack_range,
               "enemy.follow_range must be >= attack_range")

        _check(wv.base_enemies_per_wave >= 1, "waves.base_enemies_per_wave must be >= 1")
        _check(wv.wave_multiplier > 0, "waves.wave_multiplier must be > 0")
        _check(wv.enemy_spawn_delay >= 0, "waves.enemy_spawn_delay must be >= 0")
        _check(wv.time_between_waves >= 0, "waves.time_between_waves must be >= 0")
        _check(wv.edge_margin >= 0, "waves.edge_margin must be >= 0")

        _check(a.width > 2 * wv.edge_margin and a.height > 0, "play_area is degenerate")
        return self


_SECTION_TYPES = {
    "player": PlayerConfig,
    "weapon": WeaponConfig,
    "enemy": EnemyConfig,
    "waves": WaveConfig,
    "play_area": PlayArea,
}


def _check(condition: bool, message: str):
    if not condition:
        raise ConfigError(message)
