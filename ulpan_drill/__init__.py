"""
Ulpan Drill

Bilingual vocabulary drills with a five-level review clock.
"""

from . import normalize
from . import structured
from . import scheduler
from . import exercises
from . import evaluation
from . import stats
from . import db

__version__ = "0.1.0"
__all__ = ["normalize", "structured", "scheduler", "exercises", "evaluation", "stats", "db"]
