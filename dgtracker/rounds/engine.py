"""Live scoring state for a single round.

The engine owns a :class:`RoundState` for one round: the ordered holes of the
course, a hole cursor and every participant's strokes per hole. Scores start at
each hole's par so totals always read as a projected final score. Score edits and
navigation saturate at their bounds instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from dgtracker.courses.schemas import HoleSpec

from .models import YOU, FinishPolicy, Participant

MIN_STROKES = 1
MAX_STROKES = 20
FRONT_NINE = 9
HALFWAY_INDEX = 9
HALFWAY_MIN_HOLES = 18


class InvalidRoundError(ValueError):
    pass


class UnknownParticipantError(KeyError):
    pass


class HoleIndexError(IndexError):
    pass


@dataclass
class RoundState:
    holes: List[HoleSpec]
    current_hole_index: int = 0
    # participant id -> zero-based hole index -> strokes
    scores: Dict[str, Dict[int, int]] = field(default_factory=dict)
    halfway_review_shown: bool = False
    halfway_review_pending: bool = False


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class RoundScoringEngine:
    def __init__(self, state: RoundState):
        if not state.holes:
            raise InvalidRoundError("a round needs at least one hole")
        self.state = state

    @classmethod
    def initialize(
        cls, holes: Iterable[HoleSpec], participants: Iterable[Participant] = ()
    ) -> "RoundScoringEngine":
        ordered = sorted(holes, key=lambda hole: hole.number)
        if not ordered:
            raise InvalidRoundError("a round needs at least one hole")

        participant_ids = [YOU]
        for participant in participants:
            if participant.id not in participant_ids:
                participant_ids.append(participant.id)

        scores = {
            pid: {index: hole.par for index, hole in enumerate(ordered)}
            for pid in participant_ids
        }
        return cls(RoundState(holes=ordered, scores=scores))

    # Read-only views
    @property
    def holes(self) -> List[HoleSpec]:
        return self.state.holes

    @property
    def hole_count(self) -> int:
        return len(self.state.holes)

    @property
    def current_hole_index(self) -> int:
        return self.state.current_hole_index

    @property
    def current_hole(self) -> HoleSpec:
        return self.state.holes[self.state.current_hole_index]

    @property
    def participant_ids(self) -> List[str]:
        return list(self.state.scores)

    @property
    def holes_played(self) -> int:
        return self.state.current_hole_index

    def _participant_scores(self, participant_id: str) -> Dict[int, int]:
        try:
            return self.state.scores[participant_id]
        except KeyError:
            raise UnknownParticipantError(participant_id) from None

    def _check_index(self, hole_index: int) -> None:
        if not 0 <= hole_index < self.hole_count:
            raise HoleIndexError(
                f"hole index {hole_index} outside 0..{self.hole_count - 1}"
            )

    def get_score(self, participant_id: str, hole_index: int) -> int:
        self._check_index(hole_index)
        return self._participant_scores(participant_id)[hole_index]

    # Score edits
    def set_score(self, participant_id: str, hole_index: int, strokes: int) -> RoundState:
        scores = self._participant_scores(participant_id)
        self._check_index(hole_index)
        scores[hole_index] = _clamp(int(strokes), MIN_STROKES, MAX_STROKES)
        return self.state

    def increment_score(self, participant_id: str, hole_index: int) -> RoundState:
        return self.set_score(
            participant_id, hole_index, self.get_score(participant_id, hole_index) + 1
        )

    def decrement_score(self, participant_id: str, hole_index: int) -> RoundState:
        return self.set_score(
            participant_id, hole_index, self.get_score(participant_id, hole_index) - 1
        )

    # Navigation
    def navigate_to(self, hole_index: int) -> RoundState:
        state = self.state
        target = _clamp(int(hole_index), 0, self.hole_count - 1)
        if target == state.current_hole_index:
            return state

        state.current_hole_index = target
        state.halfway_review_pending = False
        if (
            target == HALFWAY_INDEX
            and self.hole_count >= HALFWAY_MIN_HOLES
            and not state.halfway_review_shown
        ):
            state.halfway_review_shown = True
            state.halfway_review_pending = True
        return state

    def next_hole(self) -> RoundState:
        return self.navigate_to(self.state.current_hole_index + 1)

    def previous_hole(self) -> RoundState:
        return self.navigate_to(self.state.current_hole_index - 1)

    # Aggregates
    def get_total(self, participant_id: str) -> int:
        return sum(self._participant_scores(participant_id).values())

    def get_par_total(self) -> int:
        return sum(hole.par for hole in self.state.holes)

    def get_to_par(self, participant_id: str) -> int:
        return self.get_total(participant_id) - self.get_par_total()

    def _require_front_nine(self) -> None:
        if self.hole_count < FRONT_NINE:
            raise InvalidRoundError("front nine needs at least 9 holes")

    def get_front_nine_total(self, participant_id: str) -> int:
        self._require_front_nine()
        scores = self._participant_scores(participant_id)
        return sum(scores[index] for index in range(FRONT_NINE))

    def get_front_nine_par(self) -> int:
        self._require_front_nine()
        return sum(hole.par for hole in self.state.holes[:FRONT_NINE])

    def played_total(self, participant_id: str) -> int:
        """Strokes on holes before the cursor."""
        scores = self._participant_scores(participant_id)
        return sum(scores[index] for index in range(self.holes_played))

    def played_par(self) -> int:
        return sum(hole.par for hole in self.state.holes[: self.holes_played])

    def halfway_summary(self) -> Dict[str, Dict[str, int]]:
        front_par = self.get_front_nine_par()
        summary: Dict[str, Dict[str, int]] = {}
        for pid in self.participant_ids:
            strokes = self.get_front_nine_total(pid)
            summary[pid] = {
                "strokes": strokes,
                "par": front_par,
                "toPar": strokes - front_par,
            }
        return summary

    # Completion
    def is_round_complete(self) -> bool:
        """True on the last hole, whether or not every score was edited."""
        return self.state.current_hole_index == self.hole_count - 1

    def should_show_halfway_review(self) -> bool:
        """One-shot signal raised when the cursor first reaches hole 10 of 18+."""
        pending = self.state.halfway_review_pending
        self.state.halfway_review_pending = False
        return pending

    def can_finish(self, policy: FinishPolicy = FinishPolicy.LAST_HOLE) -> bool:
        if FinishPolicy(policy) is FinishPolicy.PERMISSIVE:
            return True
        return self.is_round_complete()


__all__ = [
    "MIN_STROKES",
    "MAX_STROKES",
    "InvalidRoundError",
    "UnknownParticipantError",
    "HoleIndexError",
    "RoundState",
    "RoundScoringEngine",
]
