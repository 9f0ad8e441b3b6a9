"""Tests for the Flock update loop."""

import numpy as np
import pytest

from flockers import Boid, Flock, FlockConfig, KDTreeSearch, Vector3
from flockers.errors import DimensionError


@pytest.fixture
def flock():
    """A small seeded flock in a 200 x 100 domain."""
    return Flock(width=200, height=100, population_size=30, rng=42)


def test_population_size(flock):
    """Test the flock holds the requested number of boids."""
    assert len(flock) == 30
    assert len(flock.boids) == 30
    assert flock.frames == 0


@pytest.mark.parametrize("n", [10, 57, 200])
def test_resize_creates_exactly_n_boids_in_bounds(flock, n):
    """Test resizing yields exactly n boids inside the domain."""
    old = set(map(id, flock.boids))
    flock.resize(n)

    assert len(flock) == n
    positions = flock.positions
    assert np.all((positions[:, 0] >= 0) & (positions[:, 0] < flock.width))
    assert np.all((positions[:, 1] >= 0) & (positions[:, 1] < flock.height))
    assert old.isdisjoint(map(id, flock.boids))


def test_config_population_change_recreates_flock(flock):
    """Test that a new population size in the config rebuilds the flock."""
    flock.step(FlockConfig(population_size=12))
    assert len(flock) == 12
    assert flock.frames == 1


def test_same_population_keeps_boids(flock):
    """Test that boids survive a frame when the population is unchanged."""
    before = flock.boids
    flock.step(FlockConfig(population_size=30))
    assert all(a is b for a, b in zip(before, flock.boids))


def test_step_respects_global_max_speed(flock):
    """Test every velocity is capped by the config max speed."""
    config = FlockConfig(max_speed=1.5, population_size=30)
    flock.run(5, config)

    speeds = np.linalg.norm(flock.velocities, axis=1)
    assert np.all(speeds <= 1.5 + 1e-9)
    assert flock.frames == 5


def test_global_max_speed_not_written_to_boids(flock):
    """Test the max speed override is passed per call, not stored."""
    flock.step(FlockConfig(max_speed=1.0, population_size=30))
    assert all(boid.max_speed == 4.0 for boid in flock)


def test_step_keeps_boids_in_bounds(flock):
    """Test positions stay in the closed domain after many frames."""
    config = FlockConfig(max_speed=8.0, population_size=30)
    flock.run(50, config)

    positions = flock.positions
    assert np.all((positions[:, 0] >= 0) & (positions[:, 0] <= flock.width))
    assert np.all((positions[:, 1] >= 0) & (positions[:, 1] <= flock.height))
    assert all(boid.acceleration == Vector3.zero() for boid in flock)


def test_step_uses_snapshot_of_previous_frame():
    """Test every force is computed from the state at the start of the frame."""
    flock = Flock(width=100, height=100, population_size=20, rng=7)
    config = FlockConfig(population_size=20)

    snapshot = flock.snapshot()
    expected = []
    for i, boid in enumerate(flock.boids):
        force = boid.flock_force(
            snapshot, 1.5, 1.0, 1.0, max_speed=config.max_speed, index=i
        )
        twin = Boid(boid.position, boid.velocity)
        twin.apply_force(force)
        twin.integrate(config.max_speed)
        twin.edges(100, 100)
        expected.append(twin.position.to_array())

    flock.step(config)

    np.testing.assert_allclose(flock.positions, np.array(expected))


def test_iteration_order_has_no_effect():
    """Test that computing forces in reverse order gives the same frame."""
    config = FlockConfig(population_size=40)
    forward = Flock(width=150, height=150, population_size=40, rng=3)
    backward = Flock(width=150, height=150, population_size=40, rng=3)

    forward.step(config)

    snapshot = backward.snapshot()
    boids = backward.boids
    forces = [None] * len(boids)
    for i in reversed(range(len(boids))):
        forces[i] = boids[i].flock_force(
            snapshot,
            config.separation_strength,
            config.alignment_strength,
            config.cohesion_strength,
            max_speed=config.max_speed,
            index=i,
        )
    backward.commit(forces, config)

    np.testing.assert_allclose(forward.positions, backward.positions)
    np.testing.assert_allclose(forward.velocities, backward.velocities)


def test_kdtree_search_matches_naive():
    """Test the KD-tree search gives the same trajectories as the naive scan."""
    config = FlockConfig(population_size=60)
    naive = Flock(width=300, height=300, population_size=60, rng=11)
    tree = Flock(
        width=300, height=300, population_size=60, rng=11, neighbor_search=KDTreeSearch()
    )

    naive.run(10, config)
    tree.run(10, config)

    np.testing.assert_allclose(naive.positions, tree.positions)


def test_commit_checks_force_count(flock):
    """Test commit rejects a mismatched force list."""
    with pytest.raises(ValueError, match="expected 30 forces"):
        flock.commit([Vector3.zero()], FlockConfig(population_size=30))


def test_headings(flock):
    """Test headings match the velocity directions."""
    velocities = flock.velocities
    np.testing.assert_allclose(
        flock.headings, np.arctan2(velocities[:, 1], velocities[:, 0])
    )
    assert flock.headings[0] == pytest.approx(flock.boids[0].heading)


def test_add_boid():
    """Test adding a hand built boid."""
    flock = Flock(width=100, height=100, population_size=2, rng=1)
    index = flock.add(Boid(position=(5, 5), velocity=(1, 0)))
    assert index == 2
    assert len(flock) == 3


def test_added_boid_survives_unchanged_population():
    """Test an added boid is kept while the configured population is unchanged."""
    flock = Flock(width=100, height=100, population_size=10, rng=1)
    mine = Boid(position=(5, 5), velocity=(1, 0))
    flock.add(mine)

    flock.step(FlockConfig(population_size=10))

    assert len(flock) == 11
    assert any(boid is mine for boid in flock)
    assert flock.population_size == 10

    flock.step(FlockConfig(population_size=12))
    assert len(flock) == 12
    assert not any(boid is mine for boid in flock)


def test_seeded_flocks_are_reproducible():
    """Test that the same seed gives the same flock."""
    a = Flock(population_size=25, rng=99)
    b = Flock(population_size=25, rng=99)
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.velocities, b.velocities)


def test_reset_rng():
    """Test restoring the initial rng state reproduces a population."""
    flock = Flock(population_size=10, rng=5)
    first = flock.positions

    flock.reset_rng()
    flock.resize(10)
    np.testing.assert_array_equal(flock.positions, first)

    flock.reset_rng(6)
    flock.resize(10)
    assert not np.array_equal(flock.positions, first)


@pytest.mark.parametrize(("width", "height"), [(0, 10), (10, -1)])
def test_invalid_dimensions(width, height):
    """Test that non-positive domain sizes are rejected."""
    with pytest.raises(DimensionError):
        Flock(width=width, height=height)

    flock = Flock(width=10, height=10, population_size=1)
    with pytest.raises(DimensionError, match="must be positive"):
        flock.set_bounds(width, height)


def test_set_bounds_used_by_wrap():
    """Test that new bounds are used for wrapping."""
    flock = Flock(width=100, height=100, population_size=1, rng=0)
    flock.set_bounds(10, 10)
    flock.boids[0].position = Vector3(50, 50, 0)
    flock.boids[0].velocity = Vector3(1, 0, 0)
    flock.step(FlockConfig(population_size=1))
    assert flock.boids[0].position == Vector3(0, 0, 0)


def test_default_config_step():
    """Test stepping without a config uses the defaults."""
    flock = Flock(width=100, height=100, rng=2)
    assert len(flock) == FlockConfig().population_size
    flock.step()
    assert flock.frames == 1


def test_step_without_config_keeps_population():
    """Test stepping without a config keeps a non-default population."""
    flock = Flock(width=100, height=100, population_size=30, rng=2)
    before = flock.boids

    flock.step()

    assert len(flock) == 30
    assert all(a is b for a, b in zip(before, flock.boids))


def test_compute_forces_depend_only_on_snapshot():
    """Test forces from an earlier snapshot ignore later moves of the boids."""
    flock = Flock(width=200, height=200, population_size=2, rng=0)
    a, b = flock.boids
    a.position = Vector3(100, 100, 0)
    a.velocity = Vector3(0, 0, 0)
    b.position = Vector3(110, 100, 0)
    b.velocity = Vector3(0, 0, 0)
    config = FlockConfig(population_size=2)

    snapshot = flock.snapshot()
    before = flock.compute_forces(config, snapshot)

    a.position = Vector3(120, 100, 0)
    a.velocity = Vector3(3, 0, 0)
    after = flock.compute_forces(config, snapshot)

    assert before == after
    assert before[0].x < 0
