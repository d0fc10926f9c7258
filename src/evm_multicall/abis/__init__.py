"""Bundled contract ABIs."""

import copy
import json
from pathlib import Path

ABI_DIR = Path(__file__).parent

# ABI loading cache
_ABI_CACHE: dict[str, list] = {}


def load_abi(name: str) -> list:
    """Load a bundled ABI JSON with caching.

    Args:
        name: ABI filename (e.g., "erc20.json")

    Returns:
        Parsed ABI list (a copy; callers may mutate it)
    """
    if name not in _ABI_CACHE:
        _ABI_CACHE[name] = json.loads((ABI_DIR / name).read_text())
    return copy.deepcopy(_ABI_CACHE[name])


__all__ = ["ABI_DIR", "load_abi"]
