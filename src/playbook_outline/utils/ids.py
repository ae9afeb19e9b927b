"""ID utilities."""

from __future__ import annotations

import random
import re
import string
import time
from collections.abc import Sequence
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_ID_CHARS_RE = re.compile(r"[^a-zA-Z0-9:_-]")
_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def sanitize_node_id(raw: Any) -> str:
    """Clean a client-supplied node id.

    Non-string ids are ignored. Whitespace runs become ``_`` and anything
    outside ``[A-Za-z0-9:_-]`` is removed.

    Returns:
        The sanitized id, possibly empty.
    """

    if not isinstance(raw, str):
        return ""
    collapsed = _WHITESPACE_RE.sub("_", raw.strip())
    return _INVALID_ID_CHARS_RE.sub("", collapsed)


def fallback_node_id(phase_id: int, path_segments: Sequence[int]) -> str:
    """Positional id used when a node carries no usable id, e.g. ``p1-n2_1``."""

    return f"p{phase_id}-n{'_'.join(str(s) for s in path_segments)}"


def make_unique_node_id(base_id: str, used_ids: set[str]) -> str:
    """Return ``base_id`` or the first free ``base_id_N`` (N >= 2) and reserve it.

    Args:
        base_id: Preferred id.
        used_ids: Ids already taken in the current tree. Updated in place.
    """

    candidate = base_id
    if candidate in used_ids:
        suffix = 2
        while f"{base_id}_{suffix}" in used_ids:
            suffix += 1
        candidate = f"{base_id}_{suffix}"
    used_ids.add(candidate)
    return candidate


def to_base36(n: int) -> str:
    """Format a non-negative integer in lowercase base 36."""

    if n == 0:
        return "0"
    digits: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def new_node_id() -> str:
    """Timestamp plus random suffix, e.g. ``n_m1x2y3z4_k9a0b1c2``.

    Practically collision-free for a single client; normalization resolves the
    rare collision on the next pass.
    """

    stamp = to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(random.choices(_BASE36_ALPHABET, k=8))
    return f"n_{stamp}_{suffix}"
