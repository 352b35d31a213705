"""Score-to-rating engine."""

from .engine import compute_rating  # noqa: F401
from .resolve import rate_round, resolve_rating_key, resolve_rating_table  # noqa: F401
from .tables import (  # noqa: F401
    RATING_TABLES,
    BandRatingTable,
    DirectRatingTable,
    RatingBand,
    RatingTable,
)
