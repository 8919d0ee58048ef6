"""Growable point storage backing contours."""
from typing import Iterator, Tuple
import numpy as np

from blobtrace.types import POINT_DTYPE, OutOfMemoryError
from blobtrace.diagnostics import report_error

INITIAL_CAPACITY = 32


def allocate_points(capacity: int) -> np.ndarray:
    """Allocate uninitialized storage for ``capacity`` points."""
    return np.empty((capacity, 2), dtype=POINT_DTYPE)


class PointSequence:
    """
    Append-only sequence of integer (x, y) points.

    Storage is a numpy array whose capacity doubles when full, starting
    at 32 points. It never shrinks.
    """

    __slots__ = ("_points", "_count")

    def __init__(self):
        self._points = None
        self._count = 0

    @property
    def capacity(self) -> int:
        return 0 if self._points is None else len(self._points)

    def append(self, x: int, y: int) -> None:
        """
        Append a point.

        Raises:
            OutOfMemoryError: If growing the storage fails. The sequence
                is left unchanged.
        """
        if self._count == self.capacity:
            new_capacity = self.capacity * 2 if self.capacity else INITIAL_CAPACITY
            try:
                grown = allocate_points(new_capacity)
            except MemoryError as e:
                report_error("Out of memory")
                raise OutOfMemoryError(
                    f"Cannot grow point sequence to {new_capacity} points"
                ) from e
            if self._count:
                grown[:self._count] = self._points[:self._count]
            self._points = grown

        self._points[self._count, 0] = x
        self._points[self._count, 1] = y
        self._count += 1

    def as_array(self) -> np.ndarray:
        """Return a (N, 2) copy of the stored points."""
        if self._points is None:
            return np.empty((0, 2), dtype=POINT_DTYPE)
        return self._points[:self._count].copy()

    def tolist(self) -> list:
        """Return the points as a list of [x, y] lists."""
        return self.as_array().tolist()

    def clear(self) -> None:
        """Release the storage."""
        self._points = None
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        for i in range(self._count):
            yield int(self._points[i, 0]), int(self._points[i, 1])

    def __getitem__(self, index: int) -> Tuple[int, int]:
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("point index out of range")
        return int(self._points[index, 0]), int(self._points[index, 1])

    def __eq__(self, other) -> bool:
        if not isinstance(other, PointSequence):
            return NotImplemented
        return np.array_equal(self.as_array(), other.as_array())

    def __repr__(self) -> str:
        return f"PointSequence(count={self._count}, capacity={self.capacity})"
