"""
RecoilGunnerEnv - Gymnasium wrapper around a CombatSession
----------------------------------------------------------
- The player only moves through weapon recoil
- Holding the trigger charges a spread shot; releasing fires it
- Enemies arrive in escalating waves and attack in melee range
- Vector observation: player state + charge + top-K nearest enemies + wave info
- MultiDiscrete action space: [trigger(2), aim(8)]

Quick test:
    python -m game.recoil.recoil_env
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import SessionConfig, PlayArea
from .events import Event, DamageTaken, ScoreAwarded, ShotFired, WaveStarted
from .inputs import TriggerTracker
from .session import CombatSession, SessionPhase
from .utils import clamp, seed_everything

DEFAULT_REWARDS = {
    "R_KILL": 1.0,       # per enemy killed
    "R_DAMAGE": 0.5,     # per point of health lost
    "R_SHOT": 0.02,      # per shot fired
    "R_TIME": 0.001,     # per step
    "R_DEATH": 5.0,      # on game over
    "R_WAVE": 0.5,       # per wave reached after the first
}


class RecoilGunnerEnv(gym.Env):
    """2D recoil shooter environment"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        dt: float = 1 / 30,
        max_steps: int = 3600,  # 120s at 30 FPS
        k_enemies: int = 5,
        session_config: Optional[Dict[str, Dict[str, Any]]] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.render_mode = render_mode
        self.width = width
        self.height = height
        self.dt = dt
        self.max_steps = max_steps
        self.k_enemies = k_enemies

        overrides = dict(session_config or {})
        overrides.setdefault("play_area", {"right": float(width), "top": float(height)})
        self.session_config = SessionConfig.from_dict(overrides).validate()
        self.rewards = dict(DEFAULT_REWARDS)
        self.rewards.update(reward_config or {})

        # trigger: 0 released, 1 held; aim: 0..7 (8 directions)
        self.action_space = spaces.MultiDiscrete([2, 8])

        # Player: pos(2) vel(2) health(1) charge(1) charging(1)
        # Each enemy: rel pos(2) rel vel(2)
        # Waves: wave number(1) live enemies(1)
        obs_dim = 2 + 2 + 1 + 1 + 1 + (self.k_enemies * 4) + 2
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._aim_dirs = []
        for i in range(8):
            ang = (math.pi * 2) * (i / 8.0)
            self._aim_dirs.append((math.cos(ang), math.sin(ang)))

        self._window = None
        self.session: CombatSession = None  # type: ignore
        self._trigger = TriggerTracker()
        self._step_count = 0
        self._stats: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        session_seed = seed if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.session = CombatSession(self.session_config, seed=session_seed)
        self.session.start()
        self.session.events.drain()
        self._trigger.reset()

        self._step_count = 0
        self._stats = {"enemies_killed": 0, "damage_taken": 0, "shots_fired": 0}

        return self._get_obs(), self._get_info()

    def step(self, action):
        held, aim = bool(int(action[0])), int(action[1])
        frame = self._trigger.frame(held, self._aim_dirs[aim % 8])

        events = self.session.tick(self.dt, frame)
        reward = self._compute_reward(events)

        terminated = self.session.phase is SessionPhase.GAME_OVER
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        s = self.session
        p = s.player
        area: PlayArea = self.session_config.play_area
        max_speed = max(1e-6, p.max_speed)

        obs_parts = [
            ((p.x - area.left) / area.width) * 2 - 1,
            ((p.y - area.bottom) / area.height) * 2 - 1,
            clamp(p.vx / max_speed, -1, 1),
            clamp(p.vy / max_speed, -1, 1),
            p.health.fraction * 2 - 1,
            s.weapon.charge_fraction * 2 - 1,
            1.0 if s.weapon.charge.is_charging else -1.0,
        ]

        enemy_speed = max(1e-6, self.session_config.enemy.move_speed)
        enemies_sorted = sorted(
            s.live_enemies,
            key=lambda e: (e.x - p.x) ** 2 + (e.y - p.y) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    clamp((e.x - p.x) / area.width, -1, 1),
                    clamp((e.y - p.y) / area.height, -1, 1),
                    clamp(e.vx / enemy_speed, -1, 1),
                    clamp(e.vy / enemy_speed, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        obs_parts += [
            clamp(s.waves.wave_number / 10.0, 0, 1) * 2 - 1,
            clamp(len(s.live_enemies) / 10.0, 0, 1) * 2 - 1,
        ]
        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, events: List[Event]) -> float:
        r = self.rewards
        player_id = self.session.player.id
        reward = 0.0

        for ev in events:
            if isinstance(ev, ScoreAwarded):
                self._stats["enemies_killed"] += 1
                reward += r["R_KILL"]
            elif isinstance(ev, DamageTaken) and ev.entity_id == player_id:
                self._stats["damage_taken"] += ev.amount
                reward -= r["R_DAMAGE"] * ev.amount
            elif isinstance(ev, ShotFired):
                self._stats["shots_fired"] += 1
                reward -= r["R_SHOT"]
            elif isinstance(ev, WaveStarted) and ev.wave_number > 1:
                reward += r["R_WAVE"]

        reward -= r["R_TIME"]
        if self.session.phase is SessionPhase.GAME_OVER:
            reward -= r["R_DEATH"]
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "health": s.player.health.current,
            "score": s.score,
            "wave": s.waves.wave_number,
            "num_enemies": len(s.live_enemies),
            "num_projectiles": len(s.projectiles),
            "step": self._step_count,
            **self._stats,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self._window is None:
            from .window import RecoilWindow
            self._window = RecoilWindow(self.session, self.width, self.height,
                                        visible=self.render_mode == "human")
        self._window.session = self.session

        if self.render_mode == "human":
            self._window.on_draw()
            return None
        return self._window.read_frame()

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def run_random_episode(render: bool = True):
    """Run a random episode for testing"""
    import time

    env = RecoilGunnerEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=42)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")
    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()
            env._window.flip()
            time.sleep(env.dt)

    print(f"Random episode return: {total:.2f}  score: {info['score']}  wave: {info['wave']}")
    env.close()


if __name__ == "__main__":
    run_random_episode(render=True)
