"""A Boid (bird-oid) agent implementing Craig Reynolds's flocking rules.

Each boid only reacts to neighbours inside its sensing radii:
    - Separation: steer away from boids inside the avoidance radius
    - Alignment: match the average velocity of boids inside the perception radius
    - Cohesion: steer towards the centroid of boids inside the perception radius

Neighbour sums are computed with numpy over a ``FlockSnapshot``; the boid's own
state is kept as immutable ``Vector3`` values.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike

from flockers.neighbors import FlockSnapshot
from flockers.vector import Vector3

Neighbors = FlockSnapshot | Sequence["Boid"]


def _as_vector(value: Vector3 | ArrayLike) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3.from_array(value)


class Boid:
    """A Boid-style flocker agent.

    Boids have two sensing radii. The perception radius defines the neighbours
    used for alignment and cohesion; the smaller avoidance radius defines the
    neighbours used for separation. Each steering contribution is capped by
    ``max_force`` and velocity is capped by the max speed on every update.

    Attributes:
        position: current position
        velocity: current velocity
        acceleration: force accumulator, zero between frames
        max_force: cap on any single steering force
        max_speed: speed cap used when no override is passed to a method
        perception_radius: neighbour radius for alignment and cohesion
        avoidance_radius: neighbour radius for separation

    Notes:
        Identity is reference identity. Two boids with identical state are
        still different boids.
    """

    def __init__(
        self,
        position: Vector3 | ArrayLike = (0, 0, 0),
        velocity: Vector3 | ArrayLike = (0, 0, 0),
        max_force: float = 0.2,
        max_speed: float = 4.0,
        perception_radius: float = 50.0,
        avoidance_radius: float = 25.0,
    ) -> None:
        """Create a new Boid flocker agent.

        Args:
            position: initial position as a Vector3 or 2/3 element sequence
            velocity: initial velocity as a Vector3 or 2/3 element sequence
            max_force: cap on any single steering force (default: 0.2)
            max_speed: default speed cap (default: 4.0)
            perception_radius: radius for alignment and cohesion (default: 50)
            avoidance_radius: radius for separation (default: 25)
        """
        self.position = _as_vector(position)
        self.velocity = _as_vector(velocity)
        self.acceleration = Vector3.zero()

        self.max_force = max_force
        self.max_speed = max_speed
        self.perception_radius = perception_radius
        self.avoidance_radius = avoidance_radius

    @classmethod
    def random(
        cls,
        rng: np.random.Generator,
        width: float,
        height: float,
        **kwargs,
    ) -> Boid:
        """Create a boid at a random position with a random heading.

        The position is uniform over [0, width) x [0, height) and the initial
        speed is uniform over [2, 4).

        Args:
            rng: numpy random generator
            width: width of the domain
            height: height of the domain
            kwargs: further keyword arguments passed to the constructor
        """
        position = Vector3(rng.uniform(0, width), rng.uniform(0, height), 0.0)
        velocity = Vector3.random_unit_2d(rng).scale(rng.uniform(2, 4))
        return cls(position, velocity, **kwargs)

    @property
    def heading(self) -> float:
        """The facing angle in radians, atan2(vy, vx)."""
        return math.atan2(self.velocity.y, self.velocity.x)

    def separation(
        self,
        neighbors: Neighbors,
        strength: float,
        max_speed: float | None = None,
        index: int | None = None,
    ) -> Vector3:
        """Steer away from boids inside the avoidance radius.

        Every neighbour contributes the unit vector pointing from it to this
        boid, weighted by 1/distance, so closer neighbours dominate.

        Args:
            neighbors: FlockSnapshot or sequence of boids to consider
            strength: weight applied to the capped steering force
            max_speed: speed override, defaults to ``self.max_speed``
            index: this boid's index in the snapshot, looked up if None

        Returns:
            the steering force, the zero vector if no neighbour qualifies
        """
        snapshot, index = self._resolve(neighbors, index)
        position, velocity = self._own_state(snapshot, index)
        hood = snapshot.neighbors(position.to_array(), self.avoidance_radius, exclude=index)
        if len(hood) == 0:
            return Vector3.zero()

        inv_dist = 1.0 / hood.distances
        # unit vector away from the neighbour, then weighted by 1/distance
        weighted = hood.offsets * (inv_dist * inv_dist)[:, np.newaxis]
        average = Vector3.from_array(weighted.sum(axis=0) / len(hood))
        return self._steer(average, velocity, strength, max_speed)

    def alignment(
        self,
        neighbors: Neighbors,
        strength: float,
        max_speed: float | None = None,
        index: int | None = None,
    ) -> Vector3:
        """Steer towards the average velocity of boids inside the perception radius."""
        snapshot, index = self._resolve(neighbors, index)
        position, velocity = self._own_state(snapshot, index)
        hood = snapshot.neighbors(position.to_array(), self.perception_radius, exclude=index)
        if len(hood) == 0:
            return Vector3.zero()

        average = Vector3.from_array(snapshot.velocities[hood.indices].mean(axis=0))
        return self._steer(average, velocity, strength, max_speed)

    def cohesion(
        self,
        neighbors: Neighbors,
        strength: float,
        max_speed: float | None = None,
        index: int | None = None,
    ) -> Vector3:
        """Steer towards the centroid of boids inside the perception radius."""
        snapshot, index = self._resolve(neighbors, index)
        position, velocity = self._own_state(snapshot, index)
        hood = snapshot.neighbors(position.to_array(), self.perception_radius, exclude=index)
        if len(hood) == 0:
            return Vector3.zero()

        centroid = Vector3.from_array(snapshot.positions[hood.indices].mean(axis=0))
        return self._steer(centroid - position, velocity, strength, max_speed)

    def flock_force(
        self,
        neighbors: Neighbors,
        separation: float,
        alignment: float,
        cohesion: float,
        max_speed: float | None = None,
        index: int | None = None,
    ) -> Vector3:
        """Return the sum of the three steering forces.

        The forces are limited independently and then simply added; none of
        them takes precedence over another.
        """
        snapshot, index = self._resolve(neighbors, index)
        return (
            self.separation(snapshot, separation, max_speed, index)
            + self.alignment(snapshot, alignment, max_speed, index)
            + self.cohesion(snapshot, cohesion, max_speed, index)
        )

    def apply_force(self, force: Vector3) -> None:
        """Add a force to the acceleration accumulator."""
        self.acceleration = self.acceleration + force

    def integrate(self, max_speed: float | None = None) -> None:
        """Advance velocity and position by one Euler step and clear the acceleration."""
        max_speed = self.max_speed if max_speed is None else max_speed
        self.velocity = (self.velocity + self.acceleration).limit(max_speed)
        self.position = self.position + self.velocity
        self.acceleration = Vector3.zero()

    def update(
        self,
        neighbors: Neighbors,
        separation: float,
        alignment: float,
        cohesion: float,
        max_speed: float | None = None,
        index: int | None = None,
    ) -> None:
        """Compute the flocking forces against neighbors, apply them and integrate.

        Args:
            neighbors: FlockSnapshot or sequence of boids, read but never mutated
            separation: separation strength
            alignment: alignment strength
            cohesion: cohesion strength
            max_speed: speed override, defaults to ``self.max_speed``
            index: this boid's index in the snapshot, looked up if None
        """
        snapshot, index = self._resolve(neighbors, index)
        self.apply_force(self.separation(snapshot, separation, max_speed, index))
        self.apply_force(self.alignment(snapshot, alignment, max_speed, index))
        self.apply_force(self.cohesion(snapshot, cohesion, max_speed, index))
        self.integrate(max_speed)

    def edges(self, width: float, height: float) -> None:
        """Wrap the position to the opposite side when it leaves the domain."""
        x, y, z = self.position
        if x > width:
            x = 0.0
        elif x < 0:
            x = width
        if y > height:
            y = 0.0
        elif y < 0:
            y = height
        if (x, y) != (self.position.x, self.position.y):
            self.position = Vector3(x, y, z)

    def _steer(
        self, desired: Vector3, velocity: Vector3, strength: float, max_speed: float | None
    ) -> Vector3:
        """Turn a desired direction into a capped, weighted steering force."""
        max_speed = self.max_speed if max_speed is None else max_speed
        desired = desired.normalize().scale(max_speed)
        return (desired - velocity).limit(self.max_force).scale(strength)

    def _own_state(self, snapshot: FlockSnapshot, index: int | None) -> tuple[Vector3, Vector3]:
        """Position and velocity to steer from, the snapshot row when indexed."""
        if index is None:
            return self.position, self.velocity
        return (
            Vector3.from_array(snapshot.positions[index]),
            Vector3.from_array(snapshot.velocities[index]),
        )

    def _resolve(self, neighbors: Neighbors, index: int | None) -> tuple[FlockSnapshot, int | None]:
        if isinstance(neighbors, FlockSnapshot):
            snapshot = neighbors
        else:
            snapshot = FlockSnapshot.capture(list(neighbors))
        if index is None:
            index = snapshot.index_of(self)
        return snapshot, index

    def __repr__(self) -> str:  # noqa: D105
        return f"Boid(position={self.position!r}, velocity={self.velocity!r})"
