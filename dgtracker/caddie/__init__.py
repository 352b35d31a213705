from .advise import DISTANCE_TEMPLATES, advise, distance_category
from .schemas import AdviceTone, CaddieAdvice, DistanceCategory

__all__ = [
    "DISTANCE_TEMPLATES",
    "AdviceTone",
    "CaddieAdvice",
    "DistanceCategory",
    "advise",
    "distance_category",
]
