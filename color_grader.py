# color_grader.py

"""
Color and alpha for the particle field.

Both use the raw progress target, not the smoothed value that drives the
formations, so the palette reacts to the scroll immediately while the shape
catches up. Keep the two signals apart.
"""

import numba
import constants

# Module-level tuples are frozen into the compiled kernels as constants.
BLUE = constants.hex_to_rgb(constants.BLUE)
LIGHT_BLUE = constants.hex_to_rgb(constants.LIGHT_BLUE)
GOLD = constants.hex_to_rgb(constants.GOLD)
PALE_GOLD = constants.hex_to_rgb(constants.PALE_GOLD)


@numba.jit(nopython=True)
def _mix(a, b, t):
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


@numba.jit(nopython=True)
def color_for(progress, phase):
    """
    RGB color of one particle.

    - progress < 0.5: blue -> light blue by phase, then towards gold from 0.3.
    - 0.5 <= progress < 0.8: gold -> pale gold by phase, then towards blue from 0.7.
    - progress >= 0.8: blue -> light blue by phase.
    """
    if progress < 0.5:
        base = _mix(BLUE, LIGHT_BLUE, phase)
        return _mix(base, GOLD, max(0.0, (progress - 0.3) * 2.5))
    elif progress < 0.8:
        base = _mix(GOLD, PALE_GOLD, phase)
        return _mix(base, BLUE, max(0.0, (progress - 0.7) * 5.0))
    return _mix(BLUE, LIGHT_BLUE, phase)


@numba.jit(nopython=True)
def grade_colors(progress, phases, out):
    """Writes color_for(progress, phase) for every particle into `out` (N, 3)."""
    for i in range(phases.shape[0]):
        r, g, b = color_for(progress, phases[i])
        out[i, 0] = r
        out[i, 1] = g
        out[i, 2] = b


def alpha_for(progress: float) -> float:
    """Opacity shared by every particle. The per-particle base_alpha seed is not used."""
    return constants.ALPHA_BASE + progress * constants.ALPHA_GAIN
