"""Windowed moving average with O(1) updates.

The mean is maintained incrementally instead of as ``sum / count``. Each
update rescales the previous average, so float rounding can drift slightly
from a freshly computed mean over many updates. That drift is tolerated.
"""

from __future__ import annotations

from collections import deque


class MovingAverage:
    """Mean of the last ``size`` samples."""

    def __init__(self, size: int) -> None:
        self.size = max(int(size), 1)
        self._data: deque[float] = deque()
        self.average: float = 0.0

    def update(self, value: float) -> float:
        n = len(self._data)
        if n >= self.size:
            # forget the oldest datapoint
            self.average -= self._data.popleft() / n
            n -= 1
        else:
            # make room for the new datapoint
            self.average -= self.average / (n + 1)

        self._data.append(value)
        n += 1
        self.average += value / n
        return self.average

    @property
    def samples(self) -> tuple[float, ...]:
        return tuple(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"MovingAverage(size={self.size}, n={len(self._data)}, average={self.average:.3f})"
