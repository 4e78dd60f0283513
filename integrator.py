# integrator.py

import numba


@numba.jit(nopython=True, fastmath=True)
def _integrate_jit(positions, velocities, targets, attraction, friction):
    """
    Numba-accelerated damped spring step, in place.
    v += (target - p) * attraction; v *= friction; p += v
    """
    for i in range(positions.shape[0]):
        for axis in range(3):
            v = velocities[i, axis] + (targets[i, axis] - positions[i, axis]) * attraction
            v *= friction
            velocities[i, axis] = v
            positions[i, axis] += v


def integrate(positions, velocities, targets, attraction: float, friction: float):
    """
    Moves every particle one tick towards its target.

    Data Contract:
    - Inputs: positions, velocities, targets - (N, 3) float arrays.
    - Outputs: None. positions and velocities are modified in place.
    - Invariants: 0 <= friction < 1 so that motion dies out when the target
      holds still. There is no interaction between particles.
    """
    if not 0.0 <= friction < 1.0:
        raise ValueError(f"friction must be in [0, 1), got {friction}")
    _integrate_jit(positions, velocities, targets, attraction, friction)
