"""Helper functions and classes for collecting flock statistics."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd
from scipy.spatial import cKDTree

if TYPE_CHECKING:
    from flockers.flock import Flock

__all__ = [
    "FlockRecorder",
    "average_heading",
    "mean_nearest_neighbor_distance",
    "mean_speed",
    "polarization",
]


def polarization(velocities: np.ndarray) -> float:
    """Return the norm of the mean unit heading, 1 for a fully aligned flock.

    Stationary boids have no heading and are left out.
    """
    velocities = np.asarray(velocities, dtype=float)
    speeds = np.linalg.norm(velocities, axis=1) if len(velocities) else np.empty(0)
    moving = speeds > 0
    if not moving.any():
        return 0.0
    units = velocities[moving] / speeds[moving, np.newaxis]
    return float(np.linalg.norm(units.mean(axis=0)))


def average_heading(velocities: np.ndarray) -> float:
    """Calculate the average heading (direction) in radians, 0 for an empty flock."""
    velocities = np.asarray(velocities, dtype=float)
    if len(velocities) == 0:
        return 0.0
    mean_velocity = velocities.mean(axis=0)
    return float(np.arctan2(mean_velocity[1], mean_velocity[0]))


def mean_speed(velocities: np.ndarray) -> float:
    """Mean speed of the flock, 0 for an empty flock."""
    velocities = np.asarray(velocities, dtype=float)
    if len(velocities) == 0:
        return 0.0
    return float(np.linalg.norm(velocities, axis=1).mean())


def mean_nearest_neighbor_distance(positions: np.ndarray) -> float:
    """Mean distance from each boid to its closest other boid, NaN with fewer than two boids."""
    positions = np.asarray(positions, dtype=float)
    if len(positions) < 2:
        return float("nan")
    distances, _ = cKDTree(positions).query(positions, k=2)
    return float(distances[:, 1].mean())


class FlockRecorder:
    """Record flock level statistics once per frame.

    Args:
        flock: the flock to collect data from
        reporters: extra columns, mapping a name to a callable taking the flock

    Example::

        recorder = FlockRecorder(flock)
        for _ in range(100):
            flock.step(config)
            recorder.collect()
        df = recorder.to_dataframe()

    """

    def __init__(
        self,
        flock: Flock,
        reporters: dict[str, Callable[[Flock], Any]] | None = None,
    ):
        """Init."""
        self.flock = flock
        self.reporters = reporters if reporters is not None else {}
        self._rows: list[dict[str, Any]] = []

    def collect(self) -> dict[str, Any]:
        """Collect statistics for the current frame and return the new row."""
        velocities = self.flock.velocities
        row = {
            "frame": self.flock.frames,
            "population": len(self.flock),
            "polarization": polarization(velocities),
            "average_heading": average_heading(velocities),
            "mean_speed": mean_speed(velocities),
            "nearest_neighbor_distance": mean_nearest_neighbor_distance(
                self.flock.positions
            ),
        }
        for name, reporter in self.reporters.items():
            row[name] = reporter(self.flock)
        self._rows.append(row)
        return row

    @property
    def data(self) -> list[dict[str, Any]]:
        """Return the collected rows."""
        return list(self._rows)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the collected rows as a DataFrame indexed by frame."""
        if not self._rows:
            columns = [
                "frame",
                "population",
                "polarization",
                "average_heading",
                "mean_speed",
                "nearest_neighbor_distance",
                *self.reporters,
            ]
            return pd.DataFrame(columns=columns).set_index("frame")
        return pd.DataFrame(self._rows).set_index("frame")

    def clear(self) -> None:
        """Drop all collected rows."""
        self._rows.clear()
