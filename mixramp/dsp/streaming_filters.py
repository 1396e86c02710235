"""
Stateful ReplayGain filters for chunk-by-chunk streaming analysis.
"""

from typing import Optional, Sequence

import numpy as np
from scipy import signal

from mixramp.dsp.filter_tables import BUTTER_COEFFICIENTS, YULE_COEFFICIENTS


class _StatefulFilter:
    """
    Generic stateful IIR filter wrapper using lfilter with preserved state.

    The history starts at zero (silence before the first sample), not at
    the step-response steady state.
    """

    def __init__(self, b: Sequence[float], a: Sequence[float]):
        self.b = np.asarray(b, dtype=np.float64)
        self.a = np.asarray(a, dtype=np.float64)
        self._zi: Optional[np.ndarray] = None

    @property
    def order(self) -> int:
        return max(len(self.a), len(self.b)) - 1

    def reset(self) -> None:
        self._zi = None

    def process_chunk(self, chunk: np.ndarray) -> np.ndarray:
        if chunk.size == 0:
            return np.zeros(0, dtype=np.float64)

        if self._zi is None:
            self._zi = np.zeros(self.order, dtype=np.float64)

        output, self._zi = signal.lfilter(
            self.b, self.a, np.asarray(chunk, dtype=np.float64), zi=self._zi
        )
        return output


class YuleFilter(_StatefulFilter):
    def __init__(self, sample_rate: int):
        b, a = YULE_COEFFICIENTS[sample_rate]
        super().__init__(b, a)


class ButterFilter(_StatefulFilter):
    def __init__(self, sample_rate: int):
        b, a = BUTTER_COEFFICIENTS[sample_rate]
        super().__init__(b, a)


class EqualLoudnessFilter:
    """
    ReplayGain pre-filter for one channel: Yule equal-loudness curve
    followed by the Butterworth high-pass.
    """

    def __init__(self, sample_rate: int):
        self.yule = YuleFilter(sample_rate)
        self.butter = ButterFilter(sample_rate)

    def reset(self) -> None:
        self.yule.reset()
        self.butter.reset()

    def process_chunk(self, chunk: np.ndarray) -> np.ndarray:
        return self.butter.process_chunk(self.yule.process_chunk(chunk))
