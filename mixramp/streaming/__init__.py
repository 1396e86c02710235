"""
Streaming analysis: chunked decoding, ramp extraction and tag output.
"""

from .chunk_loader import AudioMeta, ChunkLoader
from .ramp_extractor import RampExtractor, RampPoint, RampResult
from .emitter import emit, format_ramp, parse_ramp, render_tags

__all__ = [
    "AudioMeta",
    "ChunkLoader",
    "RampExtractor",
    "RampPoint",
    "RampResult",
    "emit",
    "format_ramp",
    "parse_ramp",
    "render_tags",
]
