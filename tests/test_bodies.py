"""Tests for the body store."""

import numpy as np
import pytest
from nbody_sim.errors import ConfigurationError
from nbody_sim.physics.bodies import BodyStore, draw_masses
from nbody_sim.utils.config import SimulationConfig


def test_random_store_shapes():
    """Test random initial conditions."""
    config = SimulationConfig(seed=1)
    store = BodyStore.random(100, config)
    
    assert store.n_bodies == 100
    assert len(store) == 100
    assert store.positions.shape == (100, 2)
    assert store.velocities.shape == (100, 2)
    assert store.accelerations.shape == (100, 2)
    assert store.masses.shape == (100,)
    assert np.all(store.masses > 0)
    assert np.allclose(store.velocities, 0)
    assert np.allclose(store.accelerations, 0)


def test_random_store_is_seeded():
    """Same seed gives the same bodies."""
    a = BodyStore.random(32, SimulationConfig(seed=5))
    b = BodyStore.random(32, SimulationConfig(seed=5))
    assert np.array_equal(a.positions, b.positions)
    assert np.array_equal(a.masses, b.masses)


def test_single_body_starts_at_origin():
    """log10(1) = 0 collapses the position spread."""
    store = BodyStore.random(1, SimulationConfig(seed=0))
    assert np.allclose(store.positions, 0)


def test_non_positive_mass_draws_are_resampled():
    """A wide mass distribution never yields non-positive masses."""
    config = SimulationConfig(body_mass=1.0, mass_spread=5.0, seed=3)
    store = BodyStore.random(500, config)
    assert np.all(store.masses > 0)


def test_hopeless_mass_distribution_is_rejected():
    """Test that a distribution with no positive mass fails loudly."""
    rng = np.random.default_rng(0)
    with pytest.raises(ConfigurationError):
        draw_masses(10, -1e6, 1.0, rng)


@pytest.mark.parametrize("bad_mass", [0.0, -2.0, np.nan, np.inf])
def test_explicit_bad_mass_is_rejected(bad_mass):
    """Test that explicit non-positive or non-finite masses are rejected."""
    with pytest.raises(ConfigurationError):
        BodyStore.from_arrays(
            [[0.0, 0.0], [1.0, 0.0]],
            [[0.0, 0.0], [0.0, 0.0]],
            [1.0, bad_mass],
        )


def test_shape_mismatch_is_rejected():
    with pytest.raises(ConfigurationError):
        BodyStore.from_arrays([[0.0, 0.0]], [[0.0, 0.0], [1.0, 1.0]], [1.0])
    with pytest.raises(ConfigurationError):
        BodyStore.from_arrays([[0.0, 0.0, 0.0]], [[0.0, 0.0, 0.0]], [1.0])


def test_invalid_body_count_is_rejected_before_allocation():
    config = SimulationConfig()
    for n in (0, -3, config.max_bodies + 1):
        with pytest.raises(ConfigurationError):
            BodyStore.random(n, config)


def test_swap_exchanges_buffers():
    """Test double buffering."""
    store = BodyStore.from_arrays([[1.0, 2.0]], [[0.5, 0.0]], [1.0])
    front = store.current
    back = store.next
    assert front is not back
    
    back.positions[0] = [9.0, 9.0]
    assert np.allclose(store.positions, [[1.0, 2.0]])
    
    store.swap()
    assert store.current is back
    assert store.next is front
    assert np.allclose(store.positions, [[9.0, 9.0]])


def test_masses_are_read_only():
    store = BodyStore.from_arrays([[0.0, 0.0]], [[0.0, 0.0]], [2.0])
    with pytest.raises(ValueError):
        store.masses[0] = 3.0


def test_get_state_returns_copies():
    store = BodyStore.from_arrays([[0.0, 1.0]], [[2.0, 3.0]], [4.0])
    pos, vel, acc, mass = store.get_state()
    pos[0] = [7.0, 7.0]
    assert np.allclose(store.positions, [[0.0, 1.0]])
    assert np.allclose(vel, [[2.0, 3.0]])
    assert np.allclose(acc, 0)
    assert np.allclose(mass, [4.0])


def test_set_state_overwrites_in_place():
    store = BodyStore.from_arrays([[0.0, 0.0], [1.0, 1.0]], np.zeros((2, 2)), [1.0, 1.0], np.ones((2, 2)))
    buffer = store.positions
    
    store.set_state([[5.0, 5.0], [6.0, 6.0]], [[1.0, 0.0], [0.0, 1.0]])
    
    assert store.positions is buffer
    assert np.allclose(store.positions, [[5.0, 5.0], [6.0, 6.0]])
    assert np.allclose(store.accelerations, 0.0)
    with pytest.raises(ConfigurationError):
        store.set_state(np.zeros((3, 2)), np.zeros((3, 2)))
    with pytest.raises(ConfigurationError):
        store.set_state([[np.nan, 0.0], [0.0, 0.0]], np.zeros((2, 2)))
