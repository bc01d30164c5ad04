from dataclasses import dataclass, field
from typing import Optional

NEAR_COMPLETION_RATIO = 0.9

# Reported positions within this distance of the local estimate are treated
# as jitter: one second of player slack on top of one interpolation tick.
OVERRIDE_THRESHOLD_SECONDS = 2.0


@dataclass
class PlaybackState:
    """
    Canonical state of one playback session.

    Two producers feed it: the local interpolation tick and reconciled player
    messages. Player messages win whenever they disagree with the local
    estimate by more than ``OVERRIDE_THRESHOLD_SECONDS``.
    """

    position: float = 0.0
    duration: float = 0.0  # 0 means unknown
    is_playing: bool = False
    is_visible: bool = True

    provider_key: Optional[str] = None
    tried: set[str] = field(default_factory=set)

    # Position the current provider was loaded at and whether the seek
    # burst for it already went out.
    resume_offset: float = 0.0
    has_seeked: bool = False

    @property
    def near_completion(self) -> bool:
        if self.duration <= 0:
            return False
        return self.position / self.duration >= NEAR_COMPLETION_RATIO

    def _clamp(self, value: float) -> float:
        value = max(0.0, value)
        if self.duration > 0:
            value = min(value, self.duration)
        return value

    def tick(self, seconds: float = 1.0) -> bool:
        """Advance the local estimate. Only moves while playing and visible."""
        if not self.is_playing or not self.is_visible:
            return False
        self.position = self._clamp(self.position + seconds)
        return True

    def apply_duration(self, duration: Optional[float]):
        if duration and duration > 0:
            self.duration = float(duration)
            self.position = self._clamp(self.position)

    def apply_reported_position(self, position: float) -> bool:
        """
        Take an authoritative position from the player. Returns True when it
        replaced the local estimate.
        """
        if abs(position - self.position) <= OVERRIDE_THRESHOLD_SECONDS:
            return False
        self.position = self._clamp(float(position))
        return True

    def reset_session(self, resume_seconds: float = 0.0):
        self.duration = 0.0
        self.position = max(0.0, float(resume_seconds or 0.0))
        self.is_playing = False
        self.provider_key = None
        self.tried = set()
        self.resume_offset = self.position
        self.has_seeked = False

    def begin_provider(self, key: str):
        """Switch to a freshly committed provider, keeping the position."""
        self.provider_key = key
        self.is_playing = False
        self.resume_offset = self.position
        self.has_seeked = False

    def snapshot(self) -> dict:
        return {
            "position": self.position,
            "duration": self.duration,
            "is_playing": self.is_playing,
            "provider": self.provider_key,
            "near_completion": self.near_completion,
        }
