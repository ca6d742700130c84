"""Public exports for notification sound components."""

from .clips import SoundClip, SoundError, load_wav, synthesize_ring, synthesize_tick
from .config import SoundConfig, SoundConfigurationError
from .output import SoundDeviceAudioOutput
from .service import NotificationService, load_clips

__all__ = [
    "NotificationService",
    "SoundClip",
    "SoundConfig",
    "SoundConfigurationError",
    "SoundDeviceAudioOutput",
    "SoundError",
    "load_clips",
    "load_wav",
    "synthesize_ring",
    "synthesize_tick",
]
