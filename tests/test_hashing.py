from __future__ import annotations

import re

from fontshelf.core.hashing import digest


def test_digest_is_deterministic() -> None:
    assert digest("https://x/a.woff2") == digest("https://x/a.woff2")
    assert digest(["google", "Roboto", {"weights": [400]}]) == digest(
        ["google", "Roboto", {"weights": [400]}]
    )


def test_digest_distinguishes_inputs() -> None:
    assert digest("a") != digest("b")


def test_digest_is_path_safe_hex() -> None:
    assert re.fullmatch(r"[0-9a-f]{16}", digest("Roboto"))


def test_structured_payloads_hash_their_compact_json() -> None:
    assert digest({"a": 1, "b": [1, 2]}) == digest('{"a":1,"b":[1,2]}')


def test_key_order_is_significant() -> None:
    assert digest({"a": 1, "b": 2}) != digest({"b": 2, "a": 1})
