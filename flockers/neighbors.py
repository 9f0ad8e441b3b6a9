"""Read-only flock snapshots and neighbour search.

A ``FlockSnapshot`` freezes the positions and velocities of every boid at the
start of a frame. All steering for that frame reads from the snapshot, so no
boid can observe another boid's same-frame update regardless of iteration
order.

Two search strategies are provided. ``NaiveSearch`` scans every boid and is
the reference behaviour. ``KDTreeSearch`` narrows the candidates with a
``scipy.spatial.cKDTree`` first and then applies exactly the same predicate,
so both return identical neighbour sets.

The neighbour predicate is strict on both ends: a boid at index ``i`` is a
neighbour when ``i`` is not the excluded index and ``0 < distance < radius``.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import cached_property
from typing import TYPE_CHECKING, NamedTuple, Protocol

import numpy as np
from scipy.spatial import cKDTree

if TYPE_CHECKING:
    from flockers.agent import Boid

__all__ = ["FlockSnapshot", "KDTreeSearch", "NaiveSearch", "Neighborhood", "NeighborSearch"]


class Neighborhood(NamedTuple):
    """Neighbours of a point.

    Attributes:
        indices: (k,) snapshot indices of the neighbours
        offsets: (k, 3) vectors pointing from each neighbour to the center
        distances: (k,) distances from each neighbour to the center
    """

    indices: np.ndarray
    offsets: np.ndarray
    distances: np.ndarray

    def __len__(self) -> int:  # noqa: D105
        return len(self.indices)


class NeighborSearch(Protocol):
    """Protocol for neighbour search strategies."""

    def candidates(self, snapshot: FlockSnapshot, center: np.ndarray, radius: float) -> np.ndarray:
        """Return indices that may lie within radius of center (a superset is fine)."""
        ...


class NaiveSearch:
    """Consider every boid in the snapshot, O(n) per query."""

    def candidates(self, snapshot: FlockSnapshot, center: np.ndarray, radius: float) -> np.ndarray:  # noqa: D102
        return np.arange(len(snapshot))

    def __repr__(self):  # noqa: D105
        return "NaiveSearch()"


class KDTreeSearch:
    """Use a KD-tree built once per snapshot to prune distant boids."""

    def candidates(self, snapshot: FlockSnapshot, center: np.ndarray, radius: float) -> np.ndarray:  # noqa: D102
        if len(snapshot) == 0:
            return np.empty(0, dtype=int)
        # pad the radius so rounding in the tree never drops a boid that the
        # exact predicate would keep
        padded = radius * (1 + 1e-9) + 1e-12
        idx = snapshot.kdtree.query_ball_point(center, padded)
        return np.sort(np.asarray(idx, dtype=int))

    def __repr__(self):  # noqa: D105
        return "KDTreeSearch()"


class FlockSnapshot:
    """Immutable copy of the kinematic state of a flock for a single frame.

    Attributes:
        positions: (n, 3) read-only array of positions
        velocities: (n, 3) read-only array of velocities
        search: the neighbour search strategy used for queries

    Notes:
        Rows are addressed by stable integer index, matching the order of the
        boids the snapshot was captured from. Self exclusion uses that index.
    """

    def __init__(
        self,
        positions: np.ndarray,
        velocities: np.ndarray,
        search: NeighborSearch | None = None,
    ) -> None:
        """Create a snapshot from position and velocity arrays.

        Args:
            positions: (n, 3) or (n, 2) array of positions
            velocities: array with the same shape as positions
            search: neighbour search strategy (default: NaiveSearch)
        """
        positions = _as_xyz(positions)
        velocities = _as_xyz(velocities)
        if positions.shape != velocities.shape:
            raise ValueError(
                f"positions {positions.shape} and velocities {velocities.shape} differ in shape"
            )
        positions.flags.writeable = False
        velocities.flags.writeable = False

        self.positions = positions
        self.velocities = velocities
        self.search = search if search is not None else NaiveSearch()
        self._boids: tuple[Boid, ...] = ()

    @classmethod
    def capture(cls, boids: Sequence[Boid], search: NeighborSearch | None = None) -> FlockSnapshot:
        """Copy the current state of boids into a new snapshot."""
        positions = np.array([b.position.to_array() for b in boids], dtype=float).reshape(-1, 3)
        velocities = np.array([b.velocity.to_array() for b in boids], dtype=float).reshape(-1, 3)
        snapshot = cls(positions, velocities, search=search)
        snapshot._boids = tuple(boids)
        return snapshot

    def __len__(self) -> int:  # noqa: D105
        return self.positions.shape[0]

    @cached_property
    def kdtree(self) -> cKDTree:
        """KD-tree over the positions, built on first use."""
        return cKDTree(self.positions)

    def index_of(self, boid: Boid) -> int | None:
        """Return the index a boid was captured at, or None if it is not part of the snapshot."""
        for i, other in enumerate(self._boids):
            if other is boid:
                return i
        return None

    def neighbors(
        self,
        center: np.ndarray,
        radius: float,
        exclude: int | None = None,
    ) -> Neighborhood:
        """Find all boids strictly within radius of center.

        Args:
            center: (3,) query point
            radius: search radius, boids at exactly this distance are excluded
            exclude: index to leave out, normally the querying boid itself

        Returns:
            Neighborhood with indices, offsets and distances
        """
        center = np.asarray(center, dtype=float)
        idx = self.search.candidates(self, center, radius)
        if exclude is not None:
            idx = idx[idx != exclude]

        offsets = center - self.positions[idx]
        distances = np.linalg.norm(offsets, axis=1)
        mask = (distances > 0) & (distances < radius)
        return Neighborhood(idx[mask], offsets[mask], distances[mask])


def _as_xyz(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.size == 0:
        return arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise ValueError(f"expected an (n, 2) or (n, 3) array, got shape {arr.shape}")
    if arr.shape[1] == 2:
        arr = np.column_stack([arr, np.zeros(arr.shape[0])])
    return arr
