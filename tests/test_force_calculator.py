"""Tests for the center-of-mass force law."""

import numpy as np
from nbody_sim.physics.force_calculator import ForceCalculator, evaluate_acceleration


def test_equal_masses():
    """Two unit masses 2 apart: com at distance 1, magnitude G*m*m/(1 + softening)."""
    positions = np.array([[0.0, 0.0], [2.0, 0.0]])
    masses = np.array([1.0, 1.0])
    
    a0 = evaluate_acceleration(0, positions, masses, G=1.0, softening=1.0)
    a1 = evaluate_acceleration(1, positions, masses, G=1.0, softening=1.0)
    
    assert np.allclose(a0, [0.5, 0.0])
    assert np.allclose(a1, [-0.5, 0.0])


def test_unequal_masses_are_asymmetric():
    """The force law is measured to the pair's center of mass, not to the other body."""
    positions = np.array([[0.0, 0.0], [4.0, 0.0]])
    masses = np.array([1.0, 3.0])
    
    # Pair center of mass sits at x = 3
    a0 = evaluate_acceleration(0, positions, masses, G=1.0, softening=1.0)
    a1 = evaluate_acceleration(1, positions, masses, G=1.0, softening=1.0)
    
    assert np.allclose(a0, [3.0 / 10.0, 0.0])  # d = 3
    assert np.allclose(a1, [-3.0 / 2.0, 0.0])  # d = 1


def test_contributions_add_up():
    """Three bodies: result is the sum of the pairwise terms."""
    positions = np.array([[0.0, 0.0], [2.0, 0.0], [0.0, -2.0]])
    masses = np.array([1.0, 1.0, 1.0])
    
    a0 = evaluate_acceleration(0, positions, masses, G=2.0, softening=1.0)
    
    assert np.allclose(a0, [1.0, -1.0])


def test_single_body_has_no_acceleration():
    positions = np.array([[3.0, -1.0]])
    masses = np.array([5.0])
    a = evaluate_acceleration(0, positions, masses, G=1.0, softening=1.0)
    assert np.array_equal(a, [0.0, 0.0])


def test_coincident_bodies_stay_finite():
    """Coincident bodies must not produce NaN."""
    positions = np.array([[1.0, 1.0], [1.0, 1.0], [4.0, 1.0]])
    masses = np.array([2.0, 2.0, 2.0])
    
    a0 = evaluate_acceleration(0, positions, masses, G=1.0, softening=0.5)
    
    assert np.all(np.isfinite(a0))
    # Only the third body pulls
    assert a0[0] > 0
    assert np.isclose(a0[1], 0.0)


def test_inputs_are_not_modified():
    rng = np.random.default_rng(0)
    positions = rng.normal(size=(20, 2))
    masses = rng.uniform(1.0, 2.0, 20)
    pos_before = positions.copy()
    mass_before = masses.copy()
    
    for i in range(20):
        evaluate_acceleration(i, positions, masses, G=1.0, softening=1.0)
    
    assert np.array_equal(positions, pos_before)
    assert np.array_equal(masses, mass_before)


def test_force_calculator_matches_function():
    rng = np.random.default_rng(1)
    positions = rng.normal(size=(10, 2))
    masses = rng.uniform(1.0, 2.0, 10)
    calc = ForceCalculator(G=0.5, softening=0.1)
    
    batch = calc.accelerations(positions, masses)
    assert batch.shape == (10, 2)
    for i in range(10):
        assert np.array_equal(batch[i], evaluate_acceleration(i, positions, masses, 0.5, 0.1))
    
    subset = calc.accelerations(positions, masses, indices=[2, 7])
    assert np.array_equal(subset, batch[[2, 7]])
