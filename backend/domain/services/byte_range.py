import re
from typing import Optional, Tuple

from domain.exceptions import InvalidInputError, RangeNotSatisfiableError

_RANGE_SPEC = re.compile(r"^\s*(\d*)\s*-\s*(\d*)\s*$")

def parse_range_header(header: Optional[str], size: int) -> Optional[Tuple[int, int]]:
    """
    Parse a single HTTP byte range against a file of `size` bytes.

    Returns an inclusive (start, end) pair, or None when the whole file
    should be served (no header, or a multi-range request we do not split).
    Supported forms: "bytes=0-99", "bytes=500-", "bytes=-100".

    Raises InvalidInputError for syntactically broken headers and
    RangeNotSatisfiableError when the range lies outside the file.
    """
    if header is None or not header.strip():
        return None

    unit, sep, ranges = header.strip().partition("=")
    if not sep or unit.strip().lower() != "bytes":
        raise InvalidInputError(f"Malformed Range header: {header}")

    if "," in ranges:
        return None

    match = _RANGE_SPEC.match(ranges)
    if not match:
        raise InvalidInputError(f"Malformed Range header: {header}")

    first, last = match.group(1), match.group(2)
    if first == "" and last == "":
        raise InvalidInputError(f"Malformed Range header: {header}")

    if first == "":
        # suffix range: the last N bytes
        length = int(last)
        if length == 0 or size == 0:
            raise RangeNotSatisfiableError(size)
        return max(size - length, 0), size - 1

    start = int(first)
    if last == "":
        end = size - 1
    else:
        end = int(last)
        if end < start:
            raise InvalidInputError(f"Malformed Range header: {header}")

    if start >= size:
        raise RangeNotSatisfiableError(size)

    return start, min(end, size - 1)
