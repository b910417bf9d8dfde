"""Assertion helpers shared across test modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def not_raises(exception: type[BaseException]) -> Iterator[None]:
    """Fail the test, rather than error it, if ``exception`` escapes the block."""
    try:
        yield
    except exception as exc:
        raise AssertionError(f"unexpected {type(exc).__name__}: {exc}") from exc
