import sys
from pathlib import Path

import numpy as np
import pytest

# The modules live at the repository root.
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
