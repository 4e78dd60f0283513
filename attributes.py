# attributes.py

import logging
import numpy as np

logger = logging.getLogger("particle_choreography")

ATTRIBUTE_NAMES = ('position', 'color', 'size', 'alpha')


class RenderAttributes:
    """
    The flat arrays handed to the renderer.

    Data Contract:
    - Inputs: sizes (np.ndarray) - Per-particle point sizes, copied once.
    - Outputs: positions[3N], colors[3N], sizes[N], alphas[N] as float32.
    - Side Effects: publish() overwrites the arrays and raises needs_update
      for the attributes it wrote; acknowledge() clears them.
    - Invariants: Array lengths never change. sizes is never written again
      after construction. The renderer reads only between ticks.
    """
    def __init__(self, sizes: np.ndarray):
        n = sizes.shape[0]
        self.num_particles = n
        self.positions = np.zeros(n * 3, dtype=np.float32)
        self.colors = np.zeros(n * 3, dtype=np.float32)
        self.sizes = np.asarray(sizes, dtype=np.float32).copy()
        self.alphas = np.zeros(n, dtype=np.float32)
        self.needs_update = dict.fromkeys(ATTRIBUTE_NAMES, True)
        self.version = 0

    def publish(self, positions: np.ndarray, colors: np.ndarray, alpha: float):
        """Copies one tick of state into the flat arrays and flags them as changed."""
        self.positions[:] = positions.ravel()
        self.colors[:] = colors.ravel()
        self.alphas.fill(alpha)
        self.needs_update['position'] = True
        self.needs_update['color'] = True
        self.needs_update['alpha'] = True
        self.version += 1

    def acknowledge(self):
        """Called by the renderer once it has uploaded the arrays."""
        for name in ATTRIBUTE_NAMES:
            self.needs_update[name] = False

    def dirty(self):
        return [name for name in ATTRIBUTE_NAMES if self.needs_update[name]]

    def positions_3d(self) -> np.ndarray:
        return self.positions.reshape(-1, 3)

    def colors_3d(self) -> np.ndarray:
        return self.colors.reshape(-1, 3)
