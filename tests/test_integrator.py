"""
Test Suite: Motion Integrator
=============================
The damped spring step and its convergence onto a fixed target.
"""

import numpy as np
import pytest

from integrator import integrate

ATTRACTION = 0.05
FRICTION = 0.85


class TestSingleStep:

    def test_first_step_from_rest(self):
        positions = np.zeros((1, 3))
        velocities = np.zeros((1, 3))
        targets = np.array([[1.0, -2.0, 4.0]])
        integrate(positions, velocities, targets, ATTRACTION, FRICTION)
        expected = targets * ATTRACTION * FRICTION
        np.testing.assert_allclose(velocities, expected)
        np.testing.assert_allclose(positions, expected)

    def test_particle_at_rest_on_target_stays(self):
        positions = np.array([[1.0, 2.0, 3.0]])
        velocities = np.zeros((1, 3))
        integrate(positions, velocities, positions.copy(), ATTRACTION, FRICTION)
        np.testing.assert_array_equal(positions, [[1.0, 2.0, 3.0]])
        assert not velocities.any()

    def test_friction_damps_coasting_particle(self):
        positions = np.zeros((1, 3))
        velocities = np.array([[1.0, 0.0, 0.0]])
        integrate(positions, velocities, positions.copy(), ATTRACTION, FRICTION)
        assert velocities[0, 0] == pytest.approx(0.85)
        assert positions[0, 0] == pytest.approx(0.85)

    def test_particles_are_independent(self):
        positions = np.zeros((2, 3))
        velocities = np.zeros((2, 3))
        targets = np.array([[1.0, 1.0, 1.0], [0.0, 0.0, 0.0]])
        integrate(positions, velocities, targets, ATTRACTION, FRICTION)
        assert not positions[1].any()

    @pytest.mark.parametrize("friction", [1.0, 1.2, -0.1])
    def test_invalid_friction(self, friction):
        with pytest.raises(ValueError):
            integrate(np.zeros((1, 3)), np.zeros((1, 3)), np.zeros((1, 3)), ATTRACTION, friction)


class TestConvergence:

    def distances(self, ticks):
        positions = np.zeros((1, 3))
        velocities = np.zeros((1, 3))
        targets = np.array([[3.0, -4.0, 12.0]])
        history = []
        for _ in range(ticks):
            integrate(positions, velocities, targets, ATTRACTION, FRICTION)
            history.append(float(np.linalg.norm(targets - positions)))
        return np.array(history)

    def test_converges_to_fixed_target(self):
        assert self.distances(400)[-1] < 1e-9

    def test_distance_envelope_shrinks(self):
        # The step has complex eigenvalues of modulus sqrt(0.85), so the distance
        # rings slightly while its envelope decays geometrically.
        windows = self.distances(400).reshape(10, 40).max(axis=1)
        assert np.all(np.diff(windows) < 0)

    def test_initial_approach_is_monotone(self):
        # Strictly closing in until the first overshoot at tick 10.
        history = self.distances(9)
        assert np.all(np.diff(history) < 0)
