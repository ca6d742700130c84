"""Sounddevice-backed playback for notification clips."""

import logging
import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from .clips import SoundError


class SoundDeviceAudioOutput:
    """Plays mono PCM arrays through a selected sounddevice output."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        blocksize: int = 1024,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._stream = None

    def play(self, pcm: np.ndarray, sample_rate_hz: int) -> None:
        if pcm.ndim != 1:
            raise SoundError("Expected mono PCM array for playback")
        if len(pcm) == 0:
            raise SoundError("Cannot play empty audio buffer")

        self.stop()
        pos = 0

        def callback(outdata, frames, time_info, status):
            nonlocal pos
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            end = pos + frames
            chunk = pcm[pos:end]

            if len(chunk) < frames:
                outdata[: len(chunk), 0] = chunk
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()

            outdata[:, 0] = chunk
            pos = end

        try:
            stream = sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                callback=callback,
                device=self._output_device_index,
            )
            stream.start()
        except Exception as error:
            raise SoundError(f"Audio playback failed: {error}") from error

        with self._lock:
            self._stream = stream

    def stop(self) -> None:
        with self._lock:
            stream, self._stream = self._stream, None
        if stream is None:
            return

        try:
            stream.abort()
            stream.close()
        except Exception as error:
            self._logger.warning("Failed to stop audio stream: %s", error)
