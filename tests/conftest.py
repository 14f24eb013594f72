"""
pytest configuration for the cbor7049 test suite.

Registers Hypothesis profiles; pick one with HYPOTHESIS_PROFILE
(default, ci, dev, debug).
"""

import os
import sys
from pathlib import Path

from hypothesis import Phase, Verbosity, settings

sys.path.insert(0, str(Path(__file__).parent.parent))

# Default profile: balanced speed and coverage
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
)

# CI profile: more thorough testing
settings.register_profile(
    "ci",
    max_examples=1000,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)

# Dev profile: fast iteration
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
)

# Debug profile: verbose output
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))
