# formations.py

"""
The five formation generators.

Every generator has the same signature and writes one target point per
particle into `out` (shape (N, 3)):

    generator(theta, phi, radii, phases, time, weight, out)

The particle index and count come from the loop position and the array
length. Generators only read seed data, so a particle keeps its place in
every formation and moves continuously between them.
"""

import numpy as np
import numba

# --- JIT-Compiled Formation Kernels ---
# Kept outside any class and operating only on NumPy arrays and scalars, as
# required by Numba's nopython mode.

@numba.jit(nopython=True, fastmath=True)
def genesis_targets(theta, phi, radii, phases, time, weight, out):
    """Tight sphere turning slowly about the z axis."""
    for i in range(theta.shape[0]):
        angle = theta[i] + time * 0.05
        sin_phi = np.sin(phi[i])
        out[i, 0] = radii[i] * sin_phi * np.cos(angle)
        out[i, 1] = radii[i] * sin_phi * np.sin(angle)
        out[i, 2] = radii[i] * np.cos(phi[i])


@numba.jit(nopython=True, fastmath=True)
def expansion_targets(theta, phi, radii, phases, time, weight, out):
    """
    Radial explosion. The shell grows to 9x the seed radius as the weight
    reaches 1, the azimuth is offset by the phase, and z spreads by phase.
    """
    for i in range(theta.shape[0]):
        radius = radii[i] * (1.0 + weight * 8.0)
        angle = theta[i] + phases[i]
        sin_phi = np.sin(phi[i])
        out[i, 0] = radius * sin_phi * np.cos(angle)
        out[i, 1] = radius * sin_phi * np.sin(angle)
        out[i, 2] = radius * np.cos(phi[i]) + (phases[i] - 0.5) * weight * 10.0


@numba.jit(nopython=True, fastmath=True)
def collapse_targets(theta, phi, radii, phases, time, weight, out):
    """Rotating torus whose ring (6 -> 4) and tube (2.5 -> 0.5) shrink with the weight."""
    ring_radius = 6.0 - weight * 2.0
    tube_radius = 0.5 + (1.0 - weight) * 2.0
    for i in range(theta.shape[0]):
        ring_angle = theta[i] + time * 0.2
        tube_angle = phi[i] * 2.0
        reach = ring_radius + tube_radius * np.cos(tube_angle)
        out[i, 0] = reach * np.cos(ring_angle)
        out[i, 1] = reach * np.sin(ring_angle)
        out[i, 2] = tube_radius * np.sin(tube_angle)


@numba.jit(nopython=True, fastmath=True)
def helix_targets(theta, phi, radii, phases, time, weight, out):
    """
    Double helix along y. Particles are spread along the axis by index; the
    phase picks the strand, which mirrors x and z.
    """
    count = theta.shape[0]
    for i in range(count):
        u = i / count
        h = u * np.pi * 8.0
        radius = 3.0 + np.sin(h * 0.5)
        strand = 1.0 if phases[i] > 0.5 else -1.0
        angle = h + time * 0.3
        out[i, 0] = radius * np.cos(angle) * strand
        out[i, 1] = u * 20.0 - 10.0
        out[i, 2] = radius * np.sin(angle) * strand


@numba.jit(nopython=True, fastmath=True)
def lemniscate_targets(theta, phi, radii, phases, time, weight, out):
    """Bernoulli lemniscate scaled by 8, drifting along its own path, thickened in z by phase."""
    count = theta.shape[0]
    for i in range(count):
        a = (i / count) * np.pi * 2.0 + time * 0.1
        sin_a = np.sin(a)
        cos_a = np.cos(a)
        # 1 + sin^2 >= 1, never zero
        denominator = 1.0 + sin_a * sin_a
        out[i, 0] = 8.0 * cos_a / denominator
        out[i, 1] = 8.0 * sin_a * cos_a / denominator
        out[i, 2] = (phases[i] - 0.5) * 4.0


@numba.jit(nopython=True, fastmath=True)
def blend_targets(source, target, factor, out):
    """out = source + (target - source) * factor, per axis. `out` may alias `source`."""
    for i in range(source.shape[0]):
        for axis in range(3):
            a = source[i, axis]
            out[i, axis] = a + (target[i, axis] - a) * factor


# Indexed by the formation ids in constants (GENESIS .. INFINITY).
FORMATIONS = (
    genesis_targets,
    expansion_targets,
    collapse_targets,
    helix_targets,
    lemniscate_targets,
)
