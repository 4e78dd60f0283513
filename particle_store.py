# particle_store.py

import logging
from collections import namedtuple
import numpy as np
import constants

logger = logging.getLogger("particle_choreography")

# One particle's immutable identity, as handed out by ParticleStore.seed().
ParticleSeed = namedtuple('ParticleSeed', ['theta', 'phi', 'radius', 'phase', 'base_size', 'base_alpha'])


def _freeze(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


class ParticleStore:
    """
    Fixed-size collection of particle seeds and runtime state, stored as
    NumPy arrays (Structure of Arrays).

    Data Contract:
    - Inputs:
        - num_particles (int): Number of particles. Must be a positive integer.
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: None.
    - Side Effects: Allocates every per-particle array once.
    - Invariants:
        - Seed arrays (theta, phi, radii, phases, sizes, base_alphas) are
          read-only after construction.
        - positions and velocities are (num_particles, 3) and are only
          written by the motion integrator.
        - The particle count never changes.
    """
    def __init__(self, num_particles: int, rng: np.random.Generator):
        if isinstance(num_particles, bool) or not isinstance(num_particles, (int, np.integer)):
            raise ValueError(f"particle_count must be an integer, got {num_particles!r}")
        if num_particles <= 0:
            raise ValueError(f"particle_count must be positive, got {num_particles}")

        self.num_particles = int(num_particles)
        n = self.num_particles

        # Uniform sampling over the sphere: phi from arccos of a uniform [-1, 1) value.
        self.theta = _freeze(rng.random(n) * 2.0 * np.pi)
        self.phi = _freeze(np.arccos(2.0 * rng.random(n) - 1.0))
        self.radii = _freeze(constants.SEED_RADIUS[0] + rng.random(n) * constants.SEED_RADIUS[1])
        self.phases = _freeze(rng.random(n))
        self.sizes = _freeze(constants.SEED_SIZE[0] + rng.random(n) * constants.SEED_SIZE[1])
        self.base_alphas = _freeze(constants.SEED_ALPHA[0] + rng.random(n) * constants.SEED_ALPHA[1])

        # Starting palette, used until the first tick grades the colors.
        palette = np.array([constants.hex_to_rgb(c) for c in constants.PALETTE])
        self.initial_colors = _freeze(palette[rng.integers(0, len(palette), n)])

        self.positions = self.seed_positions()
        self.velocities = np.zeros((n, 3), dtype=float)

        logger.info(f"ParticleStore created for {n} particles.")

    def seed_positions(self) -> np.ndarray:
        """Cartesian coordinates of every seed on its sphere shell."""
        sin_phi = np.sin(self.phi)
        return np.column_stack((
            self.radii * sin_phi * np.cos(self.theta),
            self.radii * sin_phi * np.sin(self.theta),
            self.radii * np.cos(self.phi),
        ))

    def seed(self, index: int) -> ParticleSeed:
        """
        One particle's seed as a ParticleSeed record. An inspection helper for
        logging and tests; the tick reads the seed arrays directly.
        """
        return ParticleSeed(
            float(self.theta[index]),
            float(self.phi[index]),
            float(self.radii[index]),
            float(self.phases[index]),
            float(self.sizes[index]),
            float(self.base_alphas[index]),
        )

    def reset(self):
        """Puts every particle back on its seed position, at rest."""
        self.positions[:] = self.seed_positions()
        self.velocities.fill(0.0)

    def __len__(self):
        return self.num_particles
