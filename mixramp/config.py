"""
Configuration dataclass for MixRamp analysis.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple


# Monotonically increasing dB levels for the tags.
DB_LADDER: Tuple[float, ...] = (
    -90.0, -60.0, -40.0, -30.0, -24.0, -21.0, -18.0, -15.0,
    -12.0, -9.0, -6.0, -3.0, 0.0, 3.0, 6.0,
)

# 100ms chunks. 20ms is the ReplayGain minimum but too short for one RMS window.
CHUNK_SECONDS = 0.10

REFERENCE_DB = 89.0


@dataclass(frozen=True)
class MixRampConfig:
    """Configuration for one analysis pass."""
    chunk_seconds: float = CHUNK_SECONDS
    ladder: Tuple[float, ...] = DB_LADDER
    reference_db: float = REFERENCE_DB
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.chunk_seconds <= 0:
            raise ValueError("chunk_seconds must be positive")
        if any(a >= b for a, b in zip(self.ladder, self.ladder[1:])):
            raise ValueError("ladder must be strictly increasing")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'MixRampConfig':
        """Create MixRampConfig from MIXRAMP_* environment variables."""
        if environ is None:
            environ = os.environ

        return cls(
            log_level=environ.get("MIXRAMP_LOG_LEVEL", "WARNING").upper(),
            log_file=environ.get("MIXRAMP_LOG_FILE") or None,
        )
