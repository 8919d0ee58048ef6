"""Blob records and the registry owning them."""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from blobtrace.points import PointSequence
from blobtrace.types import OutOfMemoryError
from blobtrace.diagnostics import report_error


@dataclass
class Contour:
    """Ordered boundary points of a blob, external or internal (hole)."""
    internal: bool = False
    points: PointSequence = field(default_factory=PointSequence)

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class Blob:
    """One 8-connected foreground region."""
    label: int = 0
    external: Contour = field(default_factory=Contour)
    internal: List[Contour] = field(default_factory=list)
    internal_count: int = 0  # number of holes, kept even without points

    @property
    def euler_number(self) -> int:
        return self.internal_count


def new_blob(label: int) -> Blob:
    return Blob(label=label)


def new_contour(internal: bool) -> Contour:
    return Contour(internal=internal)


class BlobRegistry:
    """
    Growable, index-stable list of blobs.

    Blob ``L`` lives at index ``L - 1``; blobs are never removed or
    reordered while the registry is alive.
    """

    def __init__(self):
        self.blobs: List[Blob] = []

    def allocate_blob(self, label: Optional[int] = None) -> int:
        """
        Append a fresh blob and return its index.

        Args:
            label: Label to store; defaults to index + 1

        Raises:
            OutOfMemoryError: The registry is left unchanged.
        """
        index = len(self.blobs)
        try:
            blob = new_blob(index + 1 if label is None else label)
        except MemoryError as e:
            report_error("Out of memory")
            raise OutOfMemoryError("Cannot allocate blob", self.blobs) from e
        self.blobs.append(blob)
        return index

    def add_internal_contour(self, blob_index: int) -> Contour:
        """
        Append an empty internal contour to a blob and count the hole.

        Raises:
            OutOfMemoryError: The blob's existing contours are left intact.
        """
        blob = self[blob_index]
        try:
            contour = new_contour(internal=True)
        except MemoryError as e:
            report_error("Out of memory")
            raise OutOfMemoryError("Cannot allocate internal contour", self.blobs) from e
        blob.internal.append(contour)
        blob.internal_count += 1
        return contour

    def bump_hole_count(self, blob_index: int) -> None:
        """Count a hole without storing its contour."""
        self[blob_index].internal_count += 1

    def destroy(self) -> None:
        """Release every contour and blob. Safe to call more than once."""
        destroy_blobs(self.blobs)

    def __getitem__(self, blob_index: int) -> Blob:
        if not 0 <= blob_index < len(self.blobs):
            raise IndexError(f"No blob at index {blob_index}")
        return self.blobs[blob_index]

    def __len__(self) -> int:
        return len(self.blobs)

    def __iter__(self) -> Iterator[Blob]:
        return iter(self.blobs)


def destroy_blobs(blobs: Optional[List[Blob]]) -> None:
    """
    Release all storage owned by a list of blobs.

    Internal contour points go first, then each blob's internal list and
    external points, then the list itself. ``None`` or an empty list is a
    no-op, and calling twice is harmless.
    """
    if not blobs:
        return

    for blob in blobs:
        for contour in blob.internal:
            contour.points.clear()
        blob.internal.clear()
        blob.external.points.clear()
    blobs.clear()
