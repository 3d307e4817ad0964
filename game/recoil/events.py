"""
Typed notifications emitted by the simulation.

Events are appended to an EventQueue during a tick and drained once by the
session; renderers, audio and the Gym environment read the drained list.
"""

from dataclasses import dataclass
from typing import List, Tuple, Type, TypeVar


@dataclass(frozen=True)
class Event:
    pass


@dataclass(frozen=True)
class HealthChanged(Event):
    entity_id: int
    current: int
    max: int


@dataclass(frozen=True)
class DamageTaken(Event):
    entity_id: int
    amount: int


@dataclass(frozen=True)
class Death(Event):
    entity_id: int


@dataclass(frozen=True)
class ChargeStarted(Event):
    pass


@dataclass(frozen=True)
class ChargeCancelled(Event):
    charge_elapsed: float = 0.0


@dataclass(frozen=True)
class ShotFired(Event):
    charge_fraction: float
    bullet_count: int
    recoil_magnitude: float


@dataclass(frozen=True)
class WaveStarted(Event):
    wave_number: int
    enemy_count: int


@dataclass(frozen=True)
class EnemySpawned(Event):
    entity_id: int
    position: Tuple[float, float]


@dataclass(frozen=True)
class ScoreAwarded(Event):
    entity_id: int
    value: int


@dataclass(frozen=True)
class ScoreChanged(Event):
    score: int


@dataclass(frozen=True)
class GameOver(Event):
    final_score: int
    high_score: int


@dataclass(frozen=True)
class GamePaused(Event):
    paused: bool


E = TypeVar("E", bound=Event)


class EventQueue:
    """Append-only list of events, drained once per tick"""

    def __init__(self):
        self._pending: List[Event] = []

    def emit(self, event: Event):
        self._pending.append(event)

    def pending(self, kind: Type[E]) -> List[E]:
        """Events of one type emitted since the last drain"""
        return [e for e in self._pending if isinstance(e, kind)]

    def drain(self) -> List[Event]:
        events = self._pending
        self._pending = []
        return events

    def clear(self):
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)
