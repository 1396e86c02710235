import os
from typing import List

from mixramp.exceptions import UnsupportedChannelsError, UsageError


SUPPORTED_CHANNELS = (1, 2)


def program_name(argv: List[str]) -> str:
    """Name to prefix diagnostics with; `python -m mixramp` reports as mixramp."""
    prog = os.path.basename(argv[0]) if argv else ""
    if not prog or prog == "__main__.py":
        return "mixramp"
    return prog


def validate_arguments(argv: List[str]) -> str:
    """
    Check the command line and return the input path.

    Raises:
        UsageError: unless exactly one positional argument is given
    """
    prog = program_name(argv)
    if len(argv) != 2:
        raise UsageError(
            f"Usage: {prog} <audiofile>\n"
            "<audiofile> must be a file that pydub (ffmpeg) can read."
        )
    return argv[1]


def validate_channels(channels: int) -> int:
    if channels not in SUPPORTED_CHANNELS:
        raise UnsupportedChannelsError(channels)
    return channels
