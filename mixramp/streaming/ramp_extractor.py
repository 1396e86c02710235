"""
RampExtractor: scan a track chunk by chunk and record where the loudness
first and last crosses each level of the dB ladder.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from mixramp.config import MixRampConfig
from mixramp.exceptions import NotEnoughSamplesError
from mixramp.utils.logger import get_logger, log_performance
from mixramp.validation import validate_channels

logger = get_logger(__name__)

# The loudness engine expects 16-bit signed sample magnitudes
SAMPLE_SCALE = float(1 << 15)


class RampPoint(NamedTuple):
    db: float
    time: float


# One row per ladder level; None means the level was never reached
RampTable = List[Optional[RampPoint]]


@dataclass
class RampResult:
    start: RampTable
    end: RampTable
    ladder: Tuple[float, ...]
    chunk_count: int = 0
    length_sec: float = 0.0
    track_gain: Optional[float] = None


class RampExtractor:
    """
    Build the MIXRAMP start and end tables for one track.

    Start rows hold the first chunk at or above each ladder level, End rows
    the last one, with End times counted back from the padded track length.
    """

    def __init__(self, config: Optional[MixRampConfig] = None):
        self.config = config or MixRampConfig()
        self.ladder = self.config.ladder
        self.start: RampTable = [None] * len(self.ladder)
        self.end: RampTable = [None] * len(self.ladder)
        self.length_sec = 0.0

    def reset(self, length_sec: float = 0.0) -> None:
        self.start = [None] * len(self.ladder)
        self.end = [None] * len(self.ladder)
        self.length_sec = length_sec

    def update(self, chunk_time: float, loudness_db: float) -> None:
        """Apply one chunk's start time and loudness to both tables."""
        for i, level in enumerate(self.ladder):
            if self.start[i] is None and loudness_db >= level:
                self.start[i] = RampPoint(loudness_db, chunk_time)

        # End times use the chunk start, hence the one-chunk padding of length_sec
        for i, level in enumerate(self.ladder):
            if loudness_db >= level:
                self.end[i] = RampPoint(loudness_db, self.length_sec - chunk_time)

    @log_performance
    def run(self, loader, analyzer) -> RampResult:
        """
        Analyze every complete chunk the loader yields.

        Args:
            loader: open ChunkLoader (or anything with channels, sample_rate,
                frame_count and read(frames))
            analyzer: ReplayGainAnalyzer for the loader's sample rate

        Raises:
            UnsupportedChannelsError: channel count other than 1 or 2
            NotEnoughSamplesError: chunk shorter than the analyzer's RMS window
        """
        channels = validate_channels(loader.channels)
        sample_rate = float(loader.sample_rate)
        frame_count = int(loader.frame_count)

        chunk_samples = int(self.config.chunk_seconds * sample_rate)
        min_samples = analyzer.min_samples
        if chunk_samples < min_samples:
            # TODO: double the chunk size and rescan instead of giving up
            raise NotEnoughSamplesError(chunk_samples, min_samples)

        self.reset(frame_count / sample_rate + self.config.chunk_seconds)
        logger.debug(
            f"Scanning {frame_count} frames in chunks of {chunk_samples}, "
            f"padded length {self.length_sec:.3f}s"
        )

        chunk_count = 0
        while True:
            interleaved = loader.read(chunk_samples)
            if interleaved.size != chunk_samples * channels:
                break

            scaled = SAMPLE_SCALE * np.asarray(interleaved, dtype=np.float64)
            if channels == 1:
                left, right = scaled, None
            else:
                left, right = scaled[0::2], scaled[1::2]

            chunk_time = chunk_count * chunk_samples / sample_rate
            analyzer.accept(left, right, channels)
            loudness_db = -analyzer.chunk_gain()
            self.update(chunk_time, loudness_db)

            chunk_count += 1

        track_gain = None
        if chunk_count:
            track_gain = analyzer.track_gain()
            logger.debug(f"Track ReplayGain {track_gain:+.2f} dB over {chunk_count} chunks")

        return RampResult(
            start=list(self.start),
            end=list(self.end),
            ladder=self.ladder,
            chunk_count=chunk_count,
            length_sec=self.length_sec,
            track_gain=track_gain,
        )
