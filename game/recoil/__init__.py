"""Recoil Gunner - top-down charge-shot combat simulation"""

from .config import (
    ConfigError, SessionConfig, PlayerConfig, WeaponConfig, EnemyConfig, WaveConfig, PlayArea,
)
from .damage import DamageModel
from .enemy import EnemyAgent
from .inputs import InputFrame, TriggerTracker
from .projectiles import Projectile, ProjectileSpec
from .session import CombatSession, SessionPhase
from .waves import WaveDirector, WavePhase
from .weapon import ChargeWeapon, WeaponState
from .recoil_env import RecoilGunnerEnv, run_random_episode

__all__ = [
    'ConfigError', 'SessionConfig', 'PlayerConfig', 'WeaponConfig', 'EnemyConfig',
    'WaveConfig', 'PlayArea', 'DamageModel', 'EnemyAgent', 'InputFrame', 'TriggerTracker',
    'Projectile', 'ProjectileSpec', 'CombatSession', 'SessionPhase', 'WaveDirector',
    'WavePhase', 'ChargeWeapon', 'WeaponState', 'RecoilGunnerEnv', 'run_random_episode',
]
