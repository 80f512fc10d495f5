# Copyright (c) Syntropy Systems
"""Deterministic prime sequence used to seed trials."""
from __future__ import annotations

from holdout.errors import SequenceExhaustedError


def is_prime(n: int) -> bool:
    """Return True if n is prime (trial division by 6k +/- 1)."""
    if n < 2:  # noqa: PLR2004
        return False
    if n < 4:  # noqa: PLR2004
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


class PrimeSequencer:
    """Stream of successive primes.

    The first call to next() returns the smallest prime >= floor; every later
    call returns the smallest prime strictly greater than the previous one.
    Two sequencers built with the same floor yield the same stream.
    """

    floor: int
    limit: int | None
    _last: int | None
    _issued: int

    def __init__(self, floor: int = 2, limit: int | None = None) -> None:
        """Initialize a sequencer.

        Args:
            floor: Lower bound (inclusive) for the first prime
            limit: Maximum number of primes to hand out, or None for no limit

        """
        if limit is not None and limit < 0:
            msg = f"limit must be non-negative, got {limit}"
            raise ValueError(msg)
        self.floor = floor
        self.limit = limit
        self._last = None
        self._issued = 0

    def next(self) -> int:
        """Return the next prime in the sequence."""
        if self.limit is not None and self._issued >= self.limit:
            msg = f"Seed sequence exhausted after {self._issued} primes"
            raise SequenceExhaustedError(msg)

        candidate = max(self.floor, 2) if self._last is None else self._last + 1
        while not is_prime(candidate):
            candidate += 1

        self._last = candidate
        self._issued += 1
        return candidate

    def __iter__(self) -> PrimeSequencer:
        return self

    def __next__(self) -> int:
        try:
            return self.next()
        except SequenceExhaustedError:
            raise StopIteration from None

    @property
    def issued(self) -> int:
        """Number of primes handed out so far."""
        return self._issued

    @property
    def last(self) -> int | None:
        """The most recently returned prime."""
        return self._last
