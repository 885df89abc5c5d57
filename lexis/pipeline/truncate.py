"""Stage 1 – Cost-bounded truncation.

Bounds the CPU cost of a detection by feeding at most ``max_chars`` Unicode
code points to the detector.  Python ``str`` is indexed by code point, so a
slice always falls between characters and never splits the multi-byte
encoding of one.
"""

from __future__ import annotations


def truncate_text(text: str, max_chars: int) -> str:
    """Return the first *max_chars* code points of *text*.

    Texts at or below the limit are returned unchanged.

    Parameters
    ----------
    text : str
        Validated, non-empty request text.
    max_chars : int
        Positive code-point limit (``MAX_CHAR_PROCESS``).

    Returns
    -------
    str
        A code-point prefix of *text* of length ``min(len(text), max_chars)``.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be a positive integer")

    if len(text) <= max_chars:
        return text

    return text[:max_chars]
