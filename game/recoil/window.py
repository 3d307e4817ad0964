"""
Arcade front end: a passive renderer for a CombatSession and an
interactive window that feeds mouse/keyboard input into one.

Play:
    python -m game.recoil.window
"""

from __future__ import annotations

import argparse
import logging

import arcade
import numpy as np

from .config import SessionConfig
from .events import DamageTaken, GameOver
from .highscore import JsonHighScoreStore
from .inputs import TriggerTracker, aim_towards, aim_from_axes
from .session import CombatSession, SessionPhase
from .utils import clamp

MAX_FRAME_DT = 1 / 20  # long frames are split so collisions stay stable


class RecoilWindow(arcade.Window):
    """Arcade window that draws the current state of a session"""

    def __init__(self, session: CombatSession, width: int, height: int,
                 title: str = "Recoil Gunner", visible: bool = True):
        super().__init__(width, height, title, visible=visible)
        self.session = session
        self.aim = (1.0, 0.0)
        self.hit_flash = 0.0  # seconds of red tint left, cosmetic only

        # Colors
        self.BG = (18, 18, 22)
        self.PLAYER_C = (80, 200, 120)
        self.PLAYER_HIT_C = (230, 90, 90)
        self.ENEMY_C = (220, 80, 80)
        self.BULLET_C = (180, 180, 220)
        self.OBSTACLE_C = (90, 90, 110)
        self.CHARGE_C = (120, 220, 240)
        self.HUD_C = (220, 220, 220)
        self.background_color = self.BG

    def read_frame(self) -> np.ndarray:
        """Draw the session and read it back as a (height, width, 3) uint8 array"""
        self.on_draw()
        image = arcade.get_image(0, 0, self.width, self.height)
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    def on_draw(self):
        """Draw the current game state"""
        self.clear()
        s = self.session
        p = s.player

        for o in s.obstacles:
            arcade.draw_circle_filled(o.x, o.y, o.radius, self.OBSTACLE_C)

        for e in s.live_enemies:
            arcade.draw_circle_filled(e.x, e.y, e.radius, self.ENEMY_C)

        for b in s.projectiles:
            arcade.draw_circle_filled(b.x, b.y, b.radius, self.BULLET_C)

        # Aim line and charge ring while charging
        if s.weapon.charge.is_charging:
            length = 60 + 60 * s.weapon.charge_fraction
            arcade.draw_line(p.x, p.y, p.x + self.aim[0] * length, p.y + self.aim[1] * length,
                             (230, 60, 60), 2)
            ring = p.radius + 6 + 18 * s.weapon.charge_fraction
            arcade.draw_circle_outline(p.x, p.y, ring, self.CHARGE_C, 2)

        color = self.PLAYER_HIT_C if self.hit_flash > 0 else self.PLAYER_C
        arcade.draw_circle_filled(p.x, p.y, p.radius, color)

        self._draw_hud()

    def _draw_hud(self):
        s = self.session
        health = s.player.health

        # Health bar
        bar_w, bar_h = 180, 10
        x0, y0 = 12, self.height - 22
        arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + bar_h, (60, 60, 60))
        fill = bar_w * clamp(health.fraction, 0, 1)
        if fill > 0:
            arcade.draw_lrbt_rectangle_filled(x0, x0 + fill, y0, y0 + bar_h, self.PLAYER_C)

        txt = (f"Health: {health.current}  "
               f"Score: {s.score} | High: {s.high_score}  "
               f"Wave: {s.waves.wave_number}")
        arcade.draw_text(txt, 12, self.height - 40, self.HUD_C, 14)

        cx, cy = self.width / 2, self.height / 2
        if s.phase is SessionPhase.PAUSED:
            arcade.draw_text("PAUSED", cx, cy, self.HUD_C, 32, anchor_x="center")
        elif s.phase is SessionPhase.GAME_OVER:
            arcade.draw_text("GAME OVER", cx, cy + 20, self.HUD_C, 32, anchor_x="center")
            arcade.draw_text(f"Final score: {s.score}  (press R to restart)",
                             cx, cy - 20, self.HUD_C, 16, anchor_x="center")


class PlayWindow(RecoilWindow):
    """Interactive window: mouse (or WASD) aims, left button charges, ESC pauses"""

    def __init__(self, session: CombatSession, width: int, height: int,
                 use_mouse_aiming: bool = True):
        super().__init__(session, width, height)
        self.use_mouse_aiming = use_mouse_aiming
        self.trigger = TriggerTracker()
        self.mouse = (width / 2, height / 2)
        self.fire_held = False
        self.pause_requested = False
        self.axes = {"left": 0, "right": 0, "up": 0, "down": 0}

    def on_update(self, delta_time: float):
        self.hit_flash = max(0.0, self.hit_flash - delta_time)
        p = self.session.player

        if self.session.phase is SessionPhase.PLAYING:
            if self.use_mouse_aiming:
                aim = aim_towards(p.position, self.mouse)
                if aim != (0.0, 0.0):
                    self.aim = aim
            else:
                h = self.axes["right"] - self.axes["left"]
                v = self.axes["up"] - self.axes["down"]
                self.aim = aim_from_axes(h, v, self.aim)

        frame = self.trigger.frame(self.fire_held, self.aim, pause_toggled=self.pause_requested)
        self.pause_requested = False

        remaining = delta_time
        while True:
            step = min(remaining, MAX_FRAME_DT)
            for ev in self.session.tick(step, frame):
                self._on_event(ev)
            remaining -= step
            if remaining <= 1e-9:
                break
            # Edges only apply to the first sub-step
            frame = self.trigger.frame(self.fire_held, self.aim)

    def _on_event(self, ev):
        if isinstance(ev, DamageTaken) and ev.entity_id == self.session.player.id:
            self.hit_flash = 0.15
        elif isinstance(ev, GameOver):
            print(f"Game Over! Final Score: {ev.final_score}  High Score: {ev.high_score}")

    def on_mouse_motion(self, x, y, dx, dy):
        self.mouse = (x, y)

    def on_mouse_press(self, x, y, button, modifiers):
        if button == arcade.MOUSE_BUTTON_LEFT:
            self.fire_held = True

    def on_mouse_release(self, x, y, button, modifiers):
        if button == arcade.MOUSE_BUTTON_LEFT:
            self.fire_held = False

    def on_key_press(self, symbol, modifiers):
        if symbol == arcade.key.ESCAPE:
            self.pause_requested = True
        elif symbol == arcade.key.R and self.session.phase is SessionPhase.GAME_OVER:
            self.session.restart()
            self.trigger.reset()
        elif symbol == arcade.key.SPACE:
            self.fire_held = True
        else:
            self._set_axis(symbol, 1)

    def on_key_release(self, symbol, modifiers):
        if symbol == arcade.key.SPACE:
            self.fire_held = False
        else:
            self._set_axis(symbol, 0)

    def _set_axis(self, symbol, value):
        mapping = {
            arcade.key.A: "left", arcade.key.LEFT: "left",
            arcade.key.D: "right", arcade.key.RIGHT: "right",
            arcade.key.W: "up", arcade.key.UP: "up",
            arcade.key.S: "down", arcade.key.DOWN: "down",
        }
        if symbol in mapping:
            self.axes[mapping[symbol]] = value


def main():
    parser = argparse.ArgumentParser(description="Play Recoil Gunner")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--keyboard-aim", action="store_true",
                        help="Aim with WASD/arrow keys instead of the mouse")
    parser.add_argument("--high-score-file", type=str, default="./highscore.json")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    config = SessionConfig.from_dict({
        "play_area": {"right": float(args.width), "top": float(args.height)},
    })
    session = CombatSession(config, high_score_store=JsonHighScoreStore(args.high_score_file),
                            seed=args.seed)
    session.start()

    PlayWindow(session, args.width, args.height, use_mouse_aiming=not args.keyboard_aim)
    arcade.run()


if __name__ == "__main__":
    main()
