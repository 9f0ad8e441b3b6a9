"""Flockers: emergent flocking of autonomous agents.

Core Objects: Boid, Flock, FlockConfig, Vector3.
"""

import datetime

from flockers.agent import Boid
from flockers.config import PARAMETER_RANGES, FlockConfig, ParameterRange
from flockers.flock import Flock
from flockers.neighbors import FlockSnapshot, KDTreeSearch, NaiveSearch
from flockers.vector import Vector3

__all__ = [
    "PARAMETER_RANGES",
    "Boid",
    "Flock",
    "FlockConfig",
    "FlockSnapshot",
    "KDTreeSearch",
    "NaiveSearch",
    "ParameterRange",
    "Vector3",
]

__title__ = "flockers"
__version__ = "0.3.0"
__license__ = "Apache 2.0"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} Flockers Team"
