"""Stable, non-cryptographic digests used for cache keys and asset identifiers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
from typing import Any

import xxhash


DIGEST_SEED = 0


def _canonical(data: Any) -> str:
    if isinstance(data, str):
        return data
    # Key order is kept as provided: callers pass keys in a fixed order.
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


def digest(data: str | Mapping[str, Any] | Sequence[Any]) -> str:
    """Return a 16-character hex digest for a string or JSON-serialisable payload.

    Strings are hashed verbatim. Structured payloads are serialised to compact
    JSON first. The result is stable across processes and platforms and safe
    to use as a filesystem path segment.
    """
    return xxhash.xxh64_hexdigest(_canonical(data).encode("utf-8"), seed=DIGEST_SEED)


__all__ = ["DIGEST_SEED", "digest"]
