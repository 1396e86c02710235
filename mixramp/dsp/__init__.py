"""
DSP package - ReplayGain loudness analysis.
"""
from .replaygain import ReplayGainAnalyzer, resolve_sample_rate
from .streaming_filters import EqualLoudnessFilter

__all__ = ['ReplayGainAnalyzer', 'resolve_sample_rate', 'EqualLoudnessFilter']
