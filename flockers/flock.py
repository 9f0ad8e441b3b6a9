"""The flock container and per-frame update loop.

Core Objects: Flock
"""

# Postpone annotation evaluation to avoid NameError from forward references (PEP 563).
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from flockers.agent import Boid
from flockers.config import FlockConfig
from flockers.errors import DimensionError
from flockers.flock_logging import create_module_logger, method_logger
from flockers.neighbors import FlockSnapshot, NaiveSearch, NeighborSearch
from flockers.vector import Vector3

SeedLike = int | np.integer | Sequence[int] | np.random.SeedSequence
RNGLike = np.random.Generator | np.random.BitGenerator

_flockers_logger = create_module_logger()


class Flock:
    """A population of boids moving in a wrap-around rectangular domain.

    The flock owns its boids in a list and addresses them by index. Each call
    to ``step`` runs two phases: every steering force is first computed against
    a read-only snapshot of the whole flock, and only then does every boid
    integrate and wrap. No boid ever sees another boid's same-frame update.

    Attributes:
        width: width of the domain
        height: height of the domain
        frames: the number of frames run so far
        population_size: the population size last applied by resize
        rng: a seeded numpy.random.Generator
        neighbor_search: strategy used to find neighbours in each snapshot

    Notes:
        The global max speed in the config is passed to every boid for the
        frame; it is never written into the boids themselves.
    """

    @method_logger(__name__)
    def __init__(
        self,
        width: float = 640,
        height: float = 480,
        population_size: int | None = None,
        rng: RNGLike | SeedLike | None = None,
        neighbor_search: NeighborSearch | None = None,
        boid_kwargs: dict | None = None,
    ) -> None:
        """Create a new flock.

        Args:
            width: width of the domain (default: 640)
            height: height of the domain (default: 480)
            population_size: number of boids to create, defaults to FlockConfig().population_size
            rng: Pseudorandom number generator state. When `rng` is None, a new `numpy.random.Generator` is created
                  using entropy from the operating system. Types other than `numpy.random.Generator` are passed to
                  `numpy.random.default_rng` to instantiate a `Generator`.
            neighbor_search: neighbour search strategy (default: NaiveSearch)
            boid_kwargs: keyword arguments passed to every Boid, e.g. radii or max_force

        Raises:
            DimensionError: if width or height is not positive
        """
        if width <= 0 or height <= 0:
            raise DimensionError(width, height)

        self.width = width
        self.height = height
        self.frames: int = 0
        self.neighbor_search = neighbor_search if neighbor_search is not None else NaiveSearch()
        self.boid_kwargs = boid_kwargs if boid_kwargs is not None else {}

        self.rng: np.random.Generator = np.random.default_rng(rng)
        self._rng = self.rng.bit_generator.state  # this allows for reproducing the rng

        self._boids: list[Boid] = []
        if population_size is None:
            population_size = FlockConfig().population_size
        self.resize(population_size)

    @property
    def boids(self) -> tuple[Boid, ...]:
        """The boids of the flock, in index order."""
        return tuple(self._boids)

    def __len__(self) -> int:  # noqa: D105
        return len(self._boids)

    def __iter__(self):  # noqa: D105
        return iter(self._boids)

    def resize(self, population_size: int) -> None:
        """Discard all boids and create population_size new ones.

        The new set is fully built before it replaces the old one.

        Args:
            population_size: number of boids in the new flock
        """
        boids = [
            Boid.random(self.rng, self.width, self.height, **self.boid_kwargs)
            for _ in range(population_size)
        ]
        self._boids = boids
        self.population_size = population_size
        _flockers_logger.info(f"created flock of {population_size} boids")

    def add(self, boid: Boid) -> int:
        """Add a boid built elsewhere and return its index.

        The configured population size is unchanged, so the boid survives
        later frames until the population size in the config changes.
        """
        self._boids.append(boid)
        return len(self._boids) - 1

    def snapshot(self) -> FlockSnapshot:
        """Capture the current state of every boid."""
        return FlockSnapshot.capture(self._boids, search=self.neighbor_search)

    def compute_forces(self, config: FlockConfig, snapshot: FlockSnapshot | None = None) -> list[Vector3]:
        """Compute every boid's combined steering force without changing any boid.

        Args:
            config: the parameters for this frame
            snapshot: state to steer against, captured now if None

        Returns:
            one force per boid, in index order
        """
        if snapshot is None:
            snapshot = self.snapshot()
        return [
            boid.flock_force(
                snapshot,
                config.separation_strength,
                config.alignment_strength,
                config.cohesion_strength,
                max_speed=config.max_speed,
                index=i,
            )
            for i, boid in enumerate(self._boids)
        ]

    def commit(self, forces: Sequence[Vector3], config: FlockConfig) -> None:
        """Apply forces, integrate and wrap every boid.

        Args:
            forces: one force per boid, as returned by compute_forces
            config: the parameters for this frame
        """
        if len(forces) != len(self._boids):
            raise ValueError(f"expected {len(self._boids)} forces, got {len(forces)}")
        for boid, force in zip(self._boids, forces):
            boid.apply_force(force)
            boid.integrate(config.max_speed)
            boid.edges(self.width, self.height)

    def step(self, config: FlockConfig | None = None) -> None:
        """Run one frame.

        A change in ``config.population_size`` from the last applied size
        recreates the whole flock before the frame runs.

        Args:
            config: the parameters for this frame. If None, the default
                weights and speed are used and the population is left as is.
        """
        if config is None:
            config = FlockConfig()
        elif config.population_size != self.population_size:
            _flockers_logger.info(
                f"population size changed from {self.population_size} to {config.population_size}"
            )
            self.resize(config.population_size)

        forces = self.compute_forces(config)
        self.commit(forces, config)
        self.frames += 1
        _flockers_logger.debug(f"frame {self.frames} done for {len(self._boids)} boids")

    def run(self, frames: int, config: FlockConfig | None = None) -> None:
        """Run the flock for a number of frames with a fixed config."""
        for _ in range(frames):
            self.step(config)

    def set_bounds(self, width: float, height: float) -> None:
        """Change the domain size, e.g. after the viewport was resized."""
        if width <= 0 or height <= 0:
            raise DimensionError(width, height)
        self.width = width
        self.height = height

    def reset_rng(self, rng: RNGLike | SeedLike | None = None) -> None:
        """Reset the random number generator.

        Args:
            rng: A new seed for the RNG; if None, restore the initial state
        """
        if rng is None:
            # Restore from saved initial state
            bg_class = getattr(np.random, self._rng["bit_generator"])
            bg = bg_class()
            bg.state = self._rng
            self.rng = np.random.Generator(bg)
        else:
            self.rng = np.random.default_rng(rng)
            self._rng = self.rng.bit_generator.state

    @property
    def positions(self) -> np.ndarray:
        """(n, 3) array of boid positions."""
        return np.array([b.position.to_array() for b in self._boids], dtype=float).reshape(-1, 3)

    @property
    def velocities(self) -> np.ndarray:
        """(n, 3) array of boid velocities."""
        return np.array([b.velocity.to_array() for b in self._boids], dtype=float).reshape(-1, 3)

    @property
    def headings(self) -> np.ndarray:
        """(n,) array of facing angles in radians, atan2(vy, vx)."""
        velocities = self.velocities
        return np.arctan2(velocities[:, 1], velocities[:, 0])
