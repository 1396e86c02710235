"""
MixRamp analyzer: loudness ramps at the head and tail of a track.
"""
__version__ = "0.1.0"
