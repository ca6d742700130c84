"""Notification clips: synthesized tones or PCM loaded from WAV files."""

from __future__ import annotations

import wave
from dataclasses import dataclass
from pathlib import Path

import numpy as np

DEFAULT_SAMPLE_RATE_HZ = 22050


class SoundError(Exception):
    """Raised when a notification clip cannot be loaded or played."""


@dataclass(frozen=True)
class SoundClip:
    """Mono float32 PCM in [-1, 1] with its sample rate."""
    pcm: np.ndarray
    sample_rate_hz: int

    @property
    def duration_seconds(self) -> float:
        return len(self.pcm) / self.sample_rate_hz

    def scaled(self, volume: float) -> "SoundClip":
        return SoundClip(
            pcm=(self.pcm * volume).astype(np.float32),
            sample_rate_hz=self.sample_rate_hz,
        )


def synthesize_tick(sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ) -> SoundClip:
    """Short percussive click played when a phase starts."""
    duration_seconds = 0.04
    t = np.arange(int(sample_rate_hz * duration_seconds)) / sample_rate_hz
    envelope = np.exp(-t * 120.0)
    pcm = 0.6 * envelope * np.sin(2.0 * np.pi * 1800.0 * t)
    return SoundClip(pcm=pcm.astype(np.float32), sample_rate_hz=sample_rate_hz)


def synthesize_ring(sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ) -> SoundClip:
    """Bell-like ding played when a phase completes."""
    duration_seconds = 1.2
    t = np.arange(int(sample_rate_hz * duration_seconds)) / sample_rate_hz
    envelope = np.exp(-t * 3.5)
    partials = (
        np.sin(2.0 * np.pi * 880.0 * t)
        + 0.5 * np.sin(2.0 * np.pi * 1760.0 * t)
        + 0.25 * np.sin(2.0 * np.pi * 2640.0 * t)
    )
    pcm = 0.5 * envelope * partials / 1.75
    return SoundClip(pcm=pcm.astype(np.float32), sample_rate_hz=sample_rate_hz)


def load_wav(path: str | Path) -> SoundClip:
    """Load a 16-bit PCM WAV file and mix it down to mono float32."""
    try:
        with wave.open(str(path), "rb") as reader:
            channels = reader.getnchannels()
            sample_width = reader.getsampwidth()
            sample_rate_hz = reader.getframerate()
            frames = reader.readframes(reader.getnframes())
    except (OSError, wave.Error) as error:
        raise SoundError(f"Failed to read WAV file {path}: {error}") from error

    if sample_width != 2:
        raise SoundError(f"Only 16-bit WAV files are supported: {path}")

    samples = np.frombuffer(frames, dtype="<i2").astype(np.float32) / 32768.0
    if channels > 1:
        samples = samples.reshape(-1, channels).mean(axis=1)
    if len(samples) == 0:
        raise SoundError(f"WAV file contains no audio: {path}")
    return SoundClip(pcm=samples.astype(np.float32), sample_rate_hz=sample_rate_hz)
