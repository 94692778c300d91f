"""Conversions between byte ranges and file-mode strings."""

from __future__ import annotations

U64_MAX = 2**64 - 1
"""Largest value an unsigned 64-bit offset can take; marks an open end."""

_FILE_TYPES = {
    0o040000: "d",
    0o120000: "l",
    0o010000: "p",
    0o140000: "s",
    0o060000: "b",
    0o020000: "c",
}


def convert_bounds(
    start: int | None = None, end: int | None = None, inclusive: bool = False
) -> tuple[int, int]:
    """Turn a byte range into an inclusive ``(start, end)`` pair.

    A missing start becomes 0 and a missing end becomes ``U64_MAX``.
    An exclusive end is reduced by one.
    """
    if start is not None and start < 0:
        raise ValueError(f"range start must not be negative: {start}")
    if end is not None and end < 0:
        raise ValueError(f"range end must not be negative: {end}")

    first = 0 if start is None else start
    if end is None:
        last = U64_MAX
    elif inclusive:
        last = end
    else:
        if end == 0:
            raise ValueError("exclusive range end of 0 has no last byte")
        last = end - 1
    return first, last


def _format_triplet(bits: int) -> str:
    return "".join(
        letter if bits & flag else "-"
        for letter, flag in (("r", 0o4), ("w", 0o2), ("x", 0o1))
    )


def format_mode(mode: int) -> str:
    """Render a file mode the way ``ls -l`` does, e.g. ``-rwxr-xr-x``."""
    file_type = _FILE_TYPES.get(mode & 0o170000, "-")
    return (
        file_type
        + _format_triplet((mode >> 6) & 0o7)
        + _format_triplet((mode >> 3) & 0o7)
        + _format_triplet(mode & 0o7)
    )