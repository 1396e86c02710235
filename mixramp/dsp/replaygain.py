"""
ReplayGain loudness analysis for streaming chunks.

Samples are fed with ``accept`` in the 16-bit convention (full scale is
32768.0). Each channel runs through the equal-loudness pre-filter
(Yule then Butter). Filtered energy is integrated over 50 ms RMS windows,
both channels jointly, and every completed window is leveled in 0.01 dB
steps (truncated). The levels feed two measurements:

1. The chunk: ``chunk_gain`` takes the 95th percentile of the window levels
   completed since the previous call (for a 100 ms chunk, its loudest
   window) and returns the gain that brings it to the 89 dB reference. It
   then resets the short-term state, filter histories included. Chunk
   levels are not clamped at 0 dB, so digital silence stays far below any
   useful threshold.

2. The whole-track histogram: the same levels clamped to 0..120 dB.
   ``track_gain`` takes the 95th percentile of it, the classic ReplayGain
   track value.
"""
import math
from typing import List, Optional, Sequence, Union

import numpy as np

from mixramp.dsp.filter_tables import SUPPORTED_SAMPLE_RATES
from mixramp.dsp.streaming_filters import EqualLoudnessFilter
from mixramp.exceptions import DSPError, NotEnoughSamplesError, UnsupportedSampleRateError
from mixramp.utils.logger import get_logger

logger = get_logger(__name__)

# Level of the filtered pink noise reference (dB re 1 LSB^2) that maps to 89 dB SPL
PINK_REF = 64.82

RMS_WINDOW_TIME = 0.050
RMS_PERCENTILE = 0.95
STEPS_PER_DB = 100
MAX_DB = 120
HISTOGRAM_SIZE = STEPS_PER_DB * MAX_DB

# Keeps log10 finite on digital silence
MEAN_SQUARE_FLOOR = 1e-37

SampleBlock = Union[np.ndarray, Sequence[float]]


def resolve_sample_rate(sample_rate: float) -> int:
    """
    Map a sample rate onto a tabulated filter rate.

    Raises:
        UnsupportedSampleRateError: if no coefficients exist for the rate
    """
    try:
        as_float = float(sample_rate)
    except (TypeError, ValueError):
        raise UnsupportedSampleRateError(float("nan")) from None

    if as_float.is_integer() and int(as_float) in SUPPORTED_SAMPLE_RATES:
        return int(as_float)
    raise UnsupportedSampleRateError(as_float)


def window_level(mean_square: float) -> int:
    """Level of a window's mean square in 0.01 dB steps, truncated, capped at 120 dB."""
    ival = int(STEPS_PER_DB * 10.0 * math.log10(mean_square + MEAN_SQUARE_FLOOR))
    return min(ival, HISTOGRAM_SIZE - 1)


def level_to_bin(mean_square: float) -> int:
    """Histogram bin (0.01 dB steps, clamped to 0..120 dB) for a window's mean square."""
    return max(window_level(mean_square), 0)


def gain_from_levels(levels: Sequence[int]) -> float:
    """
    ReplayGain value from a list of window levels.

    Same percentile rule as ``gain_from_histogram``, without the lower
    clamp.

    Raises:
        NotEnoughSamplesError: if there are no levels
    """
    elems = len(levels)
    if elems == 0:
        raise NotEnoughSamplesError(0)

    upper = int(math.ceil(elems * (1.0 - RMS_PERCENTILE)))
    level = int(np.sort(np.asarray(levels, dtype=np.int64))[-upper])
    return PINK_REF - level / STEPS_PER_DB


def gain_from_histogram(histogram: np.ndarray) -> float:
    """
    ReplayGain value from an RMS histogram.

    Walks down from the loudest bin until 5% of all windows are covered and
    returns the gain that maps that level onto the reference.

    Raises:
        NotEnoughSamplesError: if the histogram is empty
    """
    elems = int(histogram.sum())
    if elems == 0:
        raise NotEnoughSamplesError(0)

    upper = int(math.ceil(elems * (1.0 - RMS_PERCENTILE)))
    covered = np.cumsum(histogram[::-1])
    index = len(histogram) - 1 - int(np.argmax(covered >= upper))
    return PINK_REF - index / STEPS_PER_DB


class ReplayGainAnalyzer:
    """
    Stateful ReplayGain engine for one pass over a track.
    """

    def __init__(self, sample_rate: float):
        self.sample_rate = resolve_sample_rate(sample_rate)
        self.window_size = int(math.ceil(self.sample_rate * RMS_WINDOW_TIME))
        self._filters = [
            EqualLoudnessFilter(self.sample_rate),
            EqualLoudnessFilter(self.sample_rate),
        ]
        self._track_histogram = np.zeros(HISTOGRAM_SIZE, dtype=np.int64)
        self._chunk_levels: List[int] = []
        self._reset_chunk()
        logger.debug(
            f"ReplayGain analyzer at {self.sample_rate} Hz, "
            f"RMS window {self.window_size} samples"
        )

    @property
    def min_samples(self) -> int:
        """Fewest samples per chunk that still complete one RMS window."""
        return self.window_size

    def _reset_chunk(self) -> None:
        for channel_filter in self._filters:
            channel_filter.reset()
        self._chunk_levels = []
        self._chunk_frames = 0
        self._window_energy = 0.0
        self._window_weight = 0
        self._window_fill = 0

    def reset(self) -> None:
        """Forget everything, including the track histogram."""
        self._reset_chunk()
        self._track_histogram[:] = 0

    def accept(
        self,
        left: SampleBlock,
        right: Optional[SampleBlock] = None,
        channels: Optional[int] = None,
    ) -> None:
        """
        Feed one block of samples.

        Args:
            left: Left (or mono) channel samples
            right: Right channel samples, ignored for mono
            channels: 1 or 2; inferred from ``right`` when omitted
        """
        if channels is None:
            channels = 1 if right is None else 2
        if channels not in (1, 2):
            raise DSPError(f"{channels} channels not supported by ReplayGain analysis")

        left = np.asarray(left, dtype=np.float64)
        if left.ndim != 1:
            raise DSPError("samples must be one-dimensional per channel")
        count = left.size
        if count == 0:
            return

        energy = np.square(self._filters[0].process_chunk(left))
        if channels == 2:
            if right is None:
                raise DSPError("stereo analysis needs right channel samples")
            right = np.asarray(right, dtype=np.float64)
            if right.shape != left.shape:
                raise DSPError(
                    f"channel length mismatch: {left.size} left, {right.size} right"
                )
            energy += np.square(self._filters[1].process_chunk(right))

        self._chunk_frames += count

        pos = 0
        while pos < count:
            take = min(self.window_size - self._window_fill, count - pos)
            self._window_energy += float(energy[pos:pos + take].sum())
            self._window_weight += take * channels
            self._window_fill += take
            pos += take
            if self._window_fill == self.window_size:
                self._close_window()

    def _close_window(self) -> None:
        mean_square = self._window_energy / self._window_weight
        self._chunk_levels.append(window_level(mean_square))
        self._window_energy = 0.0
        self._window_weight = 0
        self._window_fill = 0

    def chunk_gain(self) -> float:
        """
        ReplayGain of the samples accepted since the previous call.

        Resets the short-term state. The loudness of the chunk relative to
        the reference is the negative of the returned value.

        Raises:
            NotEnoughSamplesError: fewer than ``min_samples`` were accepted
        """
        frames = self._chunk_frames
        levels = self._chunk_levels
        for level in levels:
            self._track_histogram[max(level, 0)] += 1
        self._reset_chunk()

        if not levels:
            raise NotEnoughSamplesError(frames, self.min_samples)
        return gain_from_levels(levels)

    def track_gain(self) -> float:
        """
        ReplayGain of every complete RMS window folded in by ``chunk_gain``.

        Raises:
            NotEnoughSamplesError: if no window was ever completed
        """
        return gain_from_histogram(self._track_histogram)
