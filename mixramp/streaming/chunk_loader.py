"""
ChunkLoader: decode an audio file and hand it out in fixed-size frame chunks.
"""

import errno
import os
from array import array
from dataclasses import dataclass
from typing import Optional

import numpy as np
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from mixramp.exceptions import AllocationError, AudioOpenError
from mixramp.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AudioMeta:
    duration_sec: float
    sample_rate: float
    channels: int
    sample_width: int
    frame_count: int


class ChunkLoader:
    """
    Read decoded PCM as interleaved float64 samples in (-1, 1).

    The decoded track is held as integer PCM; only the frames returned by
    ``read`` are converted to floats.

    pydub decodes through ffmpeg, except for WAV which it reads directly.
    """

    def __init__(self, file_path: str):
        self.file_path = str(file_path)
        self._samples: Optional[array] = None
        self._scale = 1.0
        self._meta: Optional[AudioMeta] = None
        self._position = 0

    def __enter__(self) -> 'ChunkLoader':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self._samples is not None:
            return

        try:
            audio = AudioSegment.from_file(self.file_path)
        except OSError as exc:
            if not self._is_input_path(exc.filename):
                # ffmpeg/ffprobe missing or not runnable
                raise AudioOpenError(
                    self.file_path, f"decoder unavailable: {exc}"
                ) from exc
            raise AudioOpenError(
                self.file_path, exc.strerror or str(exc), exc.errno
            ) from exc
        except (CouldntDecodeError, IndexError, ValueError) as exc:
            raise AudioOpenError(self.file_path, f"cannot decode audio: {exc}") from exc

        frame_count = int(audio.frame_count())
        self._meta = AudioMeta(
            duration_sec=frame_count / audio.frame_rate if audio.frame_rate else 0.0,
            sample_rate=float(audio.frame_rate),
            channels=audio.channels,
            sample_width=audio.sample_width,
            frame_count=frame_count,
        )

        # Integer PCM as pydub decoded it; read() normalizes one slice at a time
        try:
            self._samples = audio.get_array_of_samples()
        except MemoryError as exc:
            raise AllocationError(os.strerror(errno.ENOMEM)) from exc
        self._scale = float(2 ** (8 * audio.sample_width - 1))
        self._position = 0

        logger.debug(
            f"Opened {self.file_path}: {self._meta.channels} ch, "
            f"{self._meta.sample_rate:.0f} Hz, {self._meta.frame_count} frames, "
            f"{8 * self._meta.sample_width}-bit"
        )

    def _is_input_path(self, filename) -> bool:
        if not isinstance(filename, (str, bytes)):
            return False
        return os.path.abspath(os.fsdecode(filename)) == os.path.abspath(self.file_path)

    def close(self) -> None:
        self._samples = None
        self._position = 0

    def _require_open(self) -> None:
        if self._samples is None or self._meta is None:
            raise RuntimeError("ChunkLoader is not open")

    def get_metadata(self) -> AudioMeta:
        if self._meta is None:
            self.open()
        return self._meta

    @property
    def channels(self) -> int:
        return self.get_metadata().channels

    @property
    def sample_rate(self) -> float:
        return self.get_metadata().sample_rate

    @property
    def frame_count(self) -> int:
        return self.get_metadata().frame_count

    def read(self, frames: int) -> np.ndarray:
        """
        Return up to ``frames`` interleaved frames from the current position.

        The result has ``frames_read * channels`` samples; fewer than
        requested means the end of the data was reached.
        """
        self._require_open()
        channels = self._meta.channels
        start = self._position * channels
        stop = min(start + max(frames, 0) * channels, len(self._samples))
        chunk = np.array(self._samples[start:stop], dtype=np.float64) / self._scale
        self._position += chunk.size // channels
        return chunk
