# stage_scheduler.py

"""
Maps smoothed progress to the five stage weights and to the pair of
formations being blended.

Each stage owns a 20% window of progress and ramps in linearly across it, so
every weight is exactly 0 at the start of its window and exactly 1 at the end.
"""

from collections import namedtuple
import constants
from constants import GENESIS, EXPANSION, COLLAPSE, FORMATION, INFINITY

BlendPair = namedtuple('BlendPair', ['source', 'target', 'factor'])

# (lower progress bound, source formation, target formation). The blend
# factor is always the stage weight of the target formation.
BLEND_TABLE = (
    (constants.STAGE_STARTS[0], GENESIS, GENESIS),
    (constants.STAGE_STARTS[1], GENESIS, EXPANSION),
    (constants.STAGE_STARTS[2], EXPANSION, COLLAPSE),
    (constants.STAGE_STARTS[3], COLLAPSE, FORMATION),
    (constants.STAGE_STARTS[4], FORMATION, INFINITY),
)


def stage_weight(index: int, progress: float) -> float:
    """clamp((progress - start) * 5, 0, 1) for the stage at `index`."""
    value = (progress - constants.STAGE_STARTS[index]) * constants.STAGE_RAMP
    return min(max(value, 0.0), 1.0)


def stage_weights(progress: float) -> tuple:
    return tuple(stage_weight(i, progress) for i in range(len(constants.STAGE_STARTS)))


def select_blend(progress: float, weights: tuple = None) -> BlendPair:
    """
    Looks up the active pair for `progress`.

    Below the first transition the pair is (GENESIS, GENESIS) with factor 0.
    Progress at or above 1 stays on the last row.
    """
    if weights is None:
        weights = stage_weights(progress)

    row = BLEND_TABLE[0]
    for candidate in BLEND_TABLE[1:]:
        if progress < candidate[0]:
            break
        row = candidate

    _, source, target = row
    factor = 0.0 if source == target else weights[target]
    return BlendPair(source, target, factor)
