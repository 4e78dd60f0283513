# choreography.py

import logging
import numpy as np
import constants
from particle_store import ParticleStore
from stage_scheduler import stage_weights, select_blend
from formations import FORMATIONS, blend_targets
from integrator import integrate
from color_grader import grade_colors, alpha_for
from attributes import RenderAttributes

logger = logging.getLogger("particle_choreography")

# Ticks between throttled debug lines.
LOG_INTERVAL = 120


class ChoreographyEngine:
    """
    Drives the particle field through its five formations, one tick per frame.

    Data Contract:
    - Inputs:
        - num_particles (int): The number of particles. Must be positive.
        - config (dict): The 'simulation' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
    - Outputs: self.attributes, refreshed by every call to update().
    - Side Effects: Owns the particle store and all per-tick buffers.
    - Invariants: The number of particles is constant. Work buffers are
      allocated once here and reused every tick.
    """
    def __init__(self, num_particles: int, config: dict, rng: np.random.Generator):
        self.config = config
        self.attraction = config.get('attraction', constants.ATTRACTION)
        self.friction = config.get('friction', constants.FRICTION)
        if not 0.0 <= self.friction < 1.0:
            raise ValueError(f"friction must be in [0, 1), got {self.friction}")

        self.store = ParticleStore(num_particles, rng)
        self.num_particles = self.store.num_particles

        # --- Per-tick work buffers ---
        self.targets = np.zeros((self.num_particles, 3), dtype=float)
        self._blend_buffer = np.zeros((self.num_particles, 3), dtype=float)
        self.colors = np.array(self.store.initial_colors, dtype=float)

        self.attributes = RenderAttributes(self.store.sizes)
        self.attributes.publish(self.store.positions, self.colors, alpha_for(0.0))

        self.tick = 0
        self.active_pair = None
        self.blend_factor = 0.0

        logger.info(
            f"ChoreographyEngine created for {self.num_particles} particles "
            f"(attraction={self.attraction}, friction={self.friction})."
        )
        logger.debug(f"First particle seed: {self.store.seed(0)}")

    def _evaluate(self, formation: int, weights: tuple, elapsed_time: float, out: np.ndarray):
        s = self.store
        FORMATIONS[formation](s.theta, s.phi, s.radii, s.phases, elapsed_time, weights[formation], out)

    def compute_targets(self, scroll: float, elapsed_time: float) -> np.ndarray:
        """
        Evaluates the active pair of formations for smoothed progress `scroll`
        and blends them into self.targets, which is returned.
        """
        weights = stage_weights(scroll)
        pair = select_blend(scroll, weights)

        self._evaluate(pair.source, weights, elapsed_time, self.targets)
        if pair.target != pair.source:
            self._evaluate(pair.target, weights, elapsed_time, self._blend_buffer)
            blend_targets(self.targets, self._blend_buffer, pair.factor, self.targets)
        self.blend_factor = pair.factor

        if pair[:2] != self.active_pair:
            self.active_pair = pair[:2]
            logger.info(
                f"Blending {constants.FORMATION_TITLES[pair.source]} -> "
                f"{constants.FORMATION_TITLES[pair.target]} at progress {scroll:.3f}."
            )
        return self.targets

    def update(self, progress, elapsed_time: float, delta_time: float):
        """
        Runs one tick.

        - Inputs:
            - progress (ProgressState): Advanced once here. Its smoothed value
              drives the formations; its raw target drives color and alpha.
            - elapsed_time (float): Seconds since start, from the frame clock.
            - delta_time (float): Seconds since the previous tick. The motion
              step is per tick, so it is only reported.
        """
        scroll = progress.advance()
        raw = progress.target

        targets = self.compute_targets(scroll, elapsed_time)
        integrate(self.store.positions, self.store.velocities, targets, self.attraction, self.friction)

        grade_colors(raw, self.store.phases, self.colors)
        self.attributes.publish(self.store.positions, self.colors, alpha_for(raw))

        if self.tick % LOG_INTERVAL == 0:
            logger.debug(
                f"Tick={self.tick}, "
                f"Time={elapsed_time:.2f}, "
                f"Delta={delta_time * 1000.0:.1f}ms, "
                f"Progress={scroll:.4f}, "
                f"Target={raw:.4f}, "
                f"Factor={self.blend_factor:.4f}, "
                f"MeanDistance={self.mean_distance_to_target():.4f}"
            )
        self.tick += 1

    def mean_distance_to_target(self) -> float:
        return float(np.mean(np.linalg.norm(self.targets - self.store.positions, axis=1)))

    def reset(self):
        """Returns every particle to its seed position, at rest."""
        self.store.reset()
        self.tick = 0
        self.active_pair = None
        self.blend_factor = 0.0
        logger.info("Particle field reset to seed positions.")
