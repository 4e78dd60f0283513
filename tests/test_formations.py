"""
Test Suite: Formation Generators
================================
Geometric properties of the five target shapes and the pair blend.
"""

import numpy as np
import pytest

from formations import (
    FORMATIONS,
    genesis_targets,
    expansion_targets,
    collapse_targets,
    helix_targets,
    lemniscate_targets,
    blend_targets,
)
from particle_store import ParticleStore


@pytest.fixture
def store(rng):
    return ParticleStore(400, rng)


def run(generator, store, time=0.0, weight=0.0):
    out = np.empty((store.num_particles, 3))
    generator(store.theta, store.phi, store.radii, store.phases, time, weight, out)
    return out


class TestGenesis:

    def test_matches_seed_positions_at_time_zero(self, store):
        np.testing.assert_allclose(run(genesis_targets, store), store.seed_positions(), atol=1e-12)

    def test_rotation_keeps_radius_and_height(self, store):
        out = run(genesis_targets, store, time=37.0)
        np.testing.assert_allclose(np.linalg.norm(out, axis=1), store.radii)
        np.testing.assert_allclose(out[:, 2], store.radii * np.cos(store.phi))

    def test_azimuth_advances_slowly(self, store):
        out = run(genesis_targets, store, time=2.0)
        azimuth = np.arctan2(out[:, 1], out[:, 0])
        expected = np.angle(np.exp(1j * (store.theta + 0.1)))
        np.testing.assert_allclose(azimuth, expected, atol=1e-9)


class TestExpansion:

    def test_unexpanded_shell_keeps_seed_radius(self, store):
        out = run(expansion_targets, store, weight=0.0)
        np.testing.assert_allclose(np.linalg.norm(out, axis=1), store.radii)

    def test_full_expansion_is_nine_times_the_seed(self, store):
        out = run(expansion_targets, store, weight=1.0)
        spread = (store.phases - 0.5) * 10.0
        shell = out.copy()
        shell[:, 2] -= spread
        np.testing.assert_allclose(np.linalg.norm(shell, axis=1), store.radii * 9.0)

    def test_ignores_time(self, store):
        np.testing.assert_array_equal(
            run(expansion_targets, store, time=0.0, weight=0.4),
            run(expansion_targets, store, time=50.0, weight=0.4),
        )


class TestCollapse:

    @pytest.mark.parametrize("weight,ring,tube", [(0.0, 6.0, 2.5), (0.5, 5.0, 1.5), (1.0, 4.0, 0.5)])
    def test_points_lie_on_torus(self, store, weight, ring, tube):
        out = run(collapse_targets, store, time=3.0, weight=weight)
        rho = np.hypot(out[:, 0], out[:, 1])
        np.testing.assert_allclose((rho - ring) ** 2 + out[:, 2] ** 2, tube ** 2, rtol=1e-9)

    def test_ring_rotates_with_time(self, store):
        a = run(collapse_targets, store, time=0.0, weight=1.0)
        b = run(collapse_targets, store, time=5.0, weight=1.0)
        delta = np.angle(np.exp(1j * (np.arctan2(b[:, 1], b[:, 0]) - np.arctan2(a[:, 1], a[:, 0]))))
        np.testing.assert_allclose(delta, 1.0, atol=1e-9)


class TestHelix:

    def test_height_runs_linearly_by_index(self, store):
        out = run(helix_targets, store)
        u = np.arange(store.num_particles) / store.num_particles
        np.testing.assert_allclose(out[:, 1], u * 20.0 - 10.0)
        assert out[0, 1] == -10.0
        assert out[:, 1].max() < 10.0

    def test_radius_oscillates(self, store):
        out = run(helix_targets, store, time=4.0)
        u = np.arange(store.num_particles) / store.num_particles
        expected = 3.0 + np.sin(u * np.pi * 4.0)
        np.testing.assert_allclose(np.hypot(out[:, 0], out[:, 2]), expected)

    def test_phase_selects_mirrored_strand(self):
        seed = np.zeros(3)
        out_upper = np.empty((3, 3))
        out_lower = np.empty((3, 3))
        helix_targets(seed, seed, seed, np.full(3, 0.75), 1.5, 0.0, out_upper)
        helix_targets(seed, seed, seed, np.full(3, 0.25), 1.5, 0.0, out_lower)
        np.testing.assert_allclose(out_lower[:, [0, 2]], -out_upper[:, [0, 2]])
        np.testing.assert_array_equal(out_lower[:, 1], out_upper[:, 1])

    def test_phase_exactly_half_is_lower_strand(self):
        out_half = np.empty((1, 3))
        out_lower = np.empty((1, 3))
        zeros = np.zeros(1)
        helix_targets(zeros, zeros, zeros, np.array([0.5]), 0.0, 0.0, out_half)
        helix_targets(zeros, zeros, zeros, np.array([0.1]), 0.0, 0.0, out_lower)
        np.testing.assert_array_equal(out_half, out_lower)


class TestLemniscate:

    def test_points_satisfy_bernoulli_equation(self, store):
        out = run(lemniscate_targets, store, time=12.0)
        x, y = out[:, 0], out[:, 1]
        lhs = (x ** 2 + y ** 2) ** 2
        rhs = 64.0 * (x ** 2 - y ** 2)
        np.testing.assert_allclose(lhs, rhs, rtol=1e-9, atol=1e-9)

    def test_thickness_from_phase(self, store):
        out = run(lemniscate_targets, store)
        np.testing.assert_allclose(out[:, 2], (store.phases - 0.5) * 4.0)

    def test_bounded_extent(self, store):
        out = run(lemniscate_targets, store, time=100.0)
        assert np.abs(out[:, 0]).max() <= 8.0 + 1e-12
        assert np.abs(out[:, 1]).max() <= 4.0 + 1e-12

    def test_first_particle_starts_at_tip(self, store):
        out = run(lemniscate_targets, store)
        np.testing.assert_allclose(out[0, :2], [8.0, 0.0], atol=1e-12)


class TestBlend:

    def test_blend_endpoints_and_midpoint(self):
        a = np.array([[0.0, 2.0, -4.0]])
        b = np.array([[10.0, -2.0, 4.0]])
        out = np.empty_like(a)
        blend_targets(a, b, 0.0, out)
        np.testing.assert_array_equal(out, a)
        blend_targets(a, b, 1.0, out)
        np.testing.assert_allclose(out, b)
        blend_targets(a, b, 0.5, out)
        np.testing.assert_allclose(out, [[5.0, 0.0, 0.0]])

    def test_blend_in_place(self):
        a = np.array([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
        b = np.array([[3.0, 3.0, 3.0], [4.0, 4.0, 4.0]])
        blend_targets(a, b, 0.25, a)
        np.testing.assert_allclose(a, [[1.5] * 3, [2.5] * 3])


def test_registry_order():
    assert FORMATIONS == (
        genesis_targets,
        expansion_targets,
        collapse_targets,
        helix_targets,
        lemniscate_targets,
    )
