"""
Normalization of messages posted by embedded players.

Every embed speaks its own dialect: bare strings, JSON strings, flat objects
and ``{"type": "PLAYER_EVENT", "data": {...}}`` envelopes. ``parse_player_message``
folds them into four variants and never raises.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

PLAY_EVENTS = {"play", "playing"}
PAUSE_EVENTS = {"pause", "paused"}
TIME_EVENTS = {"timeupdate", "time_update", "time"}

POSITION_KEYS = ("time", "currentTime", "position")
DURATION_KEYS = ("duration", "totalTime", "totalDuration")

# The message itself plus up to two nested ``data`` levels.
MAX_NESTING = 2


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class TimeUpdate:
    position: float
    duration: Optional[float] = None


@dataclass(frozen=True)
class Unknown:
    raw: Any = None


PlayerSignal = Union[Play, Pause, TimeUpdate, Unknown]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _layers(message: dict) -> list[dict]:
    layers = [message]
    current = message
    for _ in range(MAX_NESTING):
        nested = current.get("data")
        if not isinstance(nested, dict):
            break
        layers.append(nested)
        current = nested
    return layers


def _find_number(layers: list[dict], keys: tuple[str, ...]) -> Optional[float]:
    for key in keys:
        for layer in layers:
            value = layer.get(key)
            if _is_number(value):
                return float(value)
    return None


def _event_name(layers: list[dict]) -> Optional[str]:
    # A nested envelope names the real event; the outer "type" is usually
    # just "PLAYER_EVENT".
    for layer in reversed(layers):
        for key in ("event", "type"):
            value = layer.get(key)
            if isinstance(value, str):
                name = value.strip().lower()
                if name in PLAY_EVENTS | PAUSE_EVENTS | TIME_EVENTS:
                    return name
    return None


def parse_player_message(raw) -> PlayerSignal:
    message = raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            message = raw.decode()
        except UnicodeDecodeError:
            return Unknown(raw)

    if isinstance(message, str):
        token = message.strip()
        try:
            message = json.loads(token)
        except json.JSONDecodeError:
            message = token

    if isinstance(message, str):
        token = message.strip().lower()
        if token in PLAY_EVENTS:
            return Play()
        if token in PAUSE_EVENTS:
            return Pause()
        return Unknown(raw)

    if not isinstance(message, dict):
        return Unknown(raw)

    layers = _layers(message)
    name = _event_name(layers)

    if name in PLAY_EVENTS:
        return Play()
    if name in PAUSE_EVENTS:
        return Pause()
    if name in TIME_EVENTS:
        position = _find_number(layers, POSITION_KEYS)
        if position is None:
            return Unknown(raw)
        return TimeUpdate(
            position=position,
            duration=_find_number(layers, DURATION_KEYS),
        )

    return Unknown(raw)


def build_seek_commands(seconds: float) -> list[dict]:
    """Outbound seek requests in every dialect the known embeds accept."""
    target = int(seconds)
    return [
        {"event": "command", "func": "seekTo", "args": [target, True]},
        {"type": "seek", "time": target},
        {"event": "seek", "time": target},
        {"action": "seek", "value": target},
        {"type": "PLAYER_COMMAND", "data": {"command": "seek", "time": target}},
    ]
