"""
Emitter: serialize ramp tables as MIXRAMP tag lines.
"""

import sys
from typing import List, Optional, TextIO

from mixramp.config import REFERENCE_DB
from mixramp.streaming.ramp_extractor import RampPoint, RampResult, RampTable

REF_TAG = "MIXRAMP_REF"
START_TAG = "MIXRAMP_START"
END_TAG = "MIXRAMP_END"


def format_ramp(table: RampTable) -> str:
    """
    Render a table as "<db> <seconds>;" pairs in ladder order.

    Unset rows and rows repeating the previously written pair are skipped.
    """
    parts = []
    last: Optional[RampPoint] = None
    for point in table:
        if point is None or point == last:
            continue
        parts.append(f"{point.db:.2f} {point.time:.2f};")
        last = point
    return "".join(parts)


def parse_ramp(body: str) -> List[RampPoint]:
    """Parse a ramp body back into its (db, seconds) pairs."""
    points = []
    for entry in body.split(";"):
        entry = entry.strip()
        if not entry:
            continue
        try:
            db, time = entry.split()
            points.append(RampPoint(float(db), float(time)))
        except ValueError as exc:
            raise ValueError(f"Malformed ramp entry {entry!r}") from exc
    return points


def render_tags(result: RampResult, reference_db: float = REFERENCE_DB) -> List[str]:
    return [
        f"{REF_TAG}={reference_db:.2f}",
        f"{START_TAG}={format_ramp(result.start)}",
        f"{END_TAG}={format_ramp(result.end)}",
    ]


def emit(result: RampResult, stream: Optional[TextIO] = None,
         reference_db: float = REFERENCE_DB) -> None:
    if stream is None:
        stream = sys.stdout
    for line in render_tags(result, reference_db):
        stream.write(line + "\n")
    stream.flush()
