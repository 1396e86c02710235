"""
Custom exception classes for the MixRamp analyzer.

Every error carries the process exit code the command line entry point
reports for it.
"""
import errno as _errno
from typing import Optional


class MixRampError(Exception):
    """Base exception for all analyzer errors."""
    exit_code = 1


class UsageError(MixRampError):
    """Raised when the command line is called with the wrong arguments."""
    pass


class AudioOpenError(MixRampError):
    """Raised when the input file cannot be opened or decoded."""

    def __init__(self, path: str, message: str, errno: Optional[int] = None):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.errno = errno

    @property
    def exit_code(self) -> int:
        return self.errno if self.errno else 1


class UnsupportedChannelsError(MixRampError):
    """Raised when the input has a channel count other than 1 or 2."""

    def __init__(self, channels: int):
        super().__init__(f"{channels} channels not supported.")
        self.channels = channels


class DSPError(MixRampError):
    """Raised when the loudness engine is fed invalid input."""
    pass


class UnsupportedSampleRateError(DSPError):
    """Raised when no ReplayGain filter coefficients exist for the rate."""

    def __init__(self, sample_rate: float):
        super().__init__(f"Unsupported sample frequency {sample_rate:f}.")
        self.sample_rate = sample_rate


class NotEnoughSamplesError(DSPError):
    """Raised when a chunk holds fewer samples than one RMS window."""

    def __init__(self, chunk_samples: int, min_samples: Optional[int] = None):
        message = f"chunkSamples {chunk_samples} too small."
        if min_samples is not None:
            message += f" At least {min_samples} required."
        super().__init__(message + " Increase the chunk duration.")
        self.chunk_samples = chunk_samples
        self.min_samples = min_samples


class AllocationError(MixRampError):
    """Raised when sample buffers cannot be allocated."""
    exit_code = _errno.ENOMEM


__all__ = [
    'MixRampError',
    'UsageError',
    'AudioOpenError',
    'UnsupportedChannelsError',
    'DSPError',
    'UnsupportedSampleRateError',
    'NotEnoughSamplesError',
    'AllocationError',
]
