"""Signal subpackage.

Only statistics computed from raw observations live here. The trend/trigger
pair consumed by the crossover engine is produced upstream.
"""

from .momersion import NEUTRAL_VALUE, MomersionIndicator, MomersionReading, compute_momersion

__all__ = [
    "NEUTRAL_VALUE",
    "MomersionIndicator",
    "MomersionReading",
    "compute_momersion",
]
