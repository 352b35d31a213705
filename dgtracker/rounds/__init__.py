"""Round scoring, live rounds and finished-round history."""

from .engine import (  # noqa: F401
    HoleIndexError,
    InvalidRoundError,
    RoundScoringEngine,
    RoundState,
    UnknownParticipantError,
)
from .models import YOU, FinishedRound, FinishPolicy, Participant  # noqa: F401
from .service import (  # noqa: F401
    RoundNotFound,
    RoundOwnershipError,
    RoundStore,
    get_round_store,
)
from .sessions import (  # noqa: F401
    FinishNotAllowed,
    LiveRound,
    LiveRoundRegistry,
    get_live_round_registry,
)
