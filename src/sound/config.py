"""Configuration model for notification clips and output selection."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class SoundConfigurationError(Exception):
    """Raised when sound configuration is invalid."""


@dataclass(frozen=True)
class SoundConfig:
    """Resolved clip files, output device, and playback volume."""
    tick_file: str = ""
    ring_file: str = ""
    output_device_index: Optional[int] = None
    volume: float = 0.8

    def __post_init__(self) -> None:
        if not 0.0 <= self.volume <= 1.0:
            raise SoundConfigurationError(
                f"Sound volume must be in [0, 1], got: {self.volume}"
            )
        for label, raw in (("tick_file", self.tick_file), ("ring_file", self.ring_file)):
            if raw and not Path(raw).is_file():
                raise SoundConfigurationError(f"Sound {label} not found: {raw}")

    @classmethod
    def from_settings(cls, settings) -> "SoundConfig":
        return cls(
            tick_file=(settings.tick_file or "").strip(),
            ring_file=(settings.ring_file or "").strip(),
            output_device_index=settings.output_device,
            volume=float(settings.volume),
        )
