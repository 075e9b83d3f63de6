import re
from typing import Any, List

_WHITESPACE = re.compile(r"\s+")


def normalize(text: Any) -> str:
    """Canonical form used for answer comparison.

    Trims, lower-cases and collapses internal whitespace runs to a single
    space. ``None`` normalizes to an empty string.
    """
    if text is None:
        return ""
    return _WHITESPACE.sub(" ", str(text).strip().lower())


def parse_variants(text: Any) -> List[str]:
    """Split a comma-separated answer list into normalized variants.

    Empty parts are dropped, so ``""`` and ``" , ,"`` both yield ``[]``.
    Callers that need a non-empty list fall back to ``[normalize(text)]``.
    """
    if text is None:
        return []
    variants = (normalize(part) for part in str(text).split(","))
    return [v for v in variants if v]
