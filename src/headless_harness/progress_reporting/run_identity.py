"""Display names for reported test runs."""

from __future__ import annotations

from collections.abc import Sequence


def chop_front(value: str, front: str) -> str:
    if front and value.startswith(front):
        return value[len(front) :]
    return value


def chop_end(value: str, end: str) -> str:
    if end and value.endswith(end):
        return value[: -len(end)]
    return value


def derive_test_identity(boot_path: str, prefixes: Sequence[str], suffix: str) -> str:
    """Strip known test-root prefixes (in order) and the boot suffix from a boot path."""
    name = boot_path.replace("\\", "/")
    for prefix in prefixes:
        name = chop_front(name, prefix)
    return chop_end(name, suffix)
