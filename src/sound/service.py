"""Notification sink that maps cycle events onto audible clips."""

import logging
from typing import Callable, Optional, Protocol

import numpy as np

from .clips import SoundClip, load_wav, synthesize_ring, synthesize_tick
from .config import SoundConfig

EVENT_TICK_STARTED = "tick_started"
EVENT_PHASE_COMPLETED = "phase_completed"
EVENT_SILENCE = "silence"


class AudioOutputLike(Protocol):
    def play(self, pcm: np.ndarray, sample_rate_hz: int) -> None:
        ...

    def stop(self) -> None:
        ...


def load_clips(config: SoundConfig) -> tuple[SoundClip, SoundClip]:
    """Return (tick, ring) clips, preferring configured WAV files."""
    tick = load_wav(config.tick_file) if config.tick_file else synthesize_tick()
    ring = load_wav(config.ring_file) if config.ring_file else synthesize_ring()
    return tick.scaled(config.volume), ring.scaled(config.volume)


class NotificationService:
    """Plays the tick clip on start, the ring clip on completion, and stops on silence."""
    def __init__(
        self,
        clips: tuple[SoundClip, SoundClip],
        output: AudioOutputLike,
        is_enabled: Callable[[], bool] = lambda: True,
        logger: Optional[logging.Logger] = None,
    ):
        self._tick_clip, self._ring_clip = clips
        self._output = output
        self._is_enabled = is_enabled
        self._logger = logger or logging.getLogger(__name__)

    def notify(self, event: str) -> None:
        if event == EVENT_SILENCE:
            self._output.stop()
            return

        if not self._is_enabled():
            return

        if event == EVENT_TICK_STARTED:
            clip = self._tick_clip
        elif event == EVENT_PHASE_COMPLETED:
            clip = self._ring_clip
        else:
            self._logger.warning("Ignoring unknown notification event: %s", event)
            return

        self._logger.debug(
            "Playing %s clip (%.2fs at %d Hz)",
            event,
            clip.duration_seconds,
            clip.sample_rate_hz,
        )
        self._output.play(clip.pcm, clip.sample_rate_hz)

    def stop(self) -> None:
        self._output.stop()
