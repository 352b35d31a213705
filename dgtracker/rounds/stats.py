from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .models import YOU, FinishedRound

DEFAULT_PAR = 3
HIGHLIGHT_COUNT = 3


class HoleStats(BaseModel):
    hole_number: int = Field(serialization_alias="holeNumber")
    par: int
    rounds: int = 0
    average: float = 0.0
    best: int = 0
    worst: int = 0
    birdies: int = 0
    pars: int = 0
    bogeys: int = 0
    worse: int = 0

    model_config = ConfigDict(populate_by_name=True)

    @property
    def to_par(self) -> float:
        return self.average - self.par


class HoleHighlight(BaseModel):
    hole_number: int = Field(serialization_alias="holeNumber")
    par: int
    average_score: float = Field(serialization_alias="averageScore")
    difference: float

    model_config = ConfigDict(populate_by_name=True)


class PlayerInsights(BaseModel):
    total_rounds: int = Field(serialization_alias="totalRounds")
    average_score: Optional[float] = Field(default=None, serialization_alias="averageScore")
    best_score: Optional[int] = Field(default=None, serialization_alias="bestScore")
    worst_score: Optional[int] = Field(default=None, serialization_alias="worstScore")
    average_rating: Optional[int] = Field(
        default=None, serialization_alias="averageRating"
    )
    improvement: float = 0.0
    best_holes: List[HoleHighlight] = Field(
        default_factory=list, serialization_alias="bestHoles"
    )
    worst_holes: List[HoleHighlight] = Field(
        default_factory=list, serialization_alias="worstHoles"
    )

    model_config = ConfigDict(populate_by_name=True)


class PlayerSummary(BaseModel):
    player_id: str = Field(serialization_alias="playerId")
    name: str
    total_rounds: int = Field(default=0, ge=0, serialization_alias="totalRounds")
    average_score: float = Field(default=0.0, serialization_alias="averageScore")
    best_score: Optional[int] = Field(default=None, serialization_alias="bestScore")
    average_rating: Optional[int] = Field(
        default=None, serialization_alias="averageRating"
    )

    model_config = ConfigDict(populate_by_name=True)


class FriendComparison(BaseModel):
    total_friends: int = Field(serialization_alias="totalFriends")
    rank_by_rounds: int = Field(serialization_alias="rankByRounds")
    rank_by_average: int = Field(serialization_alias="rankByAverage")
    rank_by_rating: Optional[int] = Field(default=None, serialization_alias="rankByRating")
    rated_players: int = Field(serialization_alias="ratedPlayers")
    better_than_rounds_pct: int = Field(serialization_alias="betterThanRoundsPct")
    better_than_average_pct: int = Field(serialization_alias="betterThanAveragePct")
    leaderboard: List[PlayerSummary] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _chronological(rounds: Sequence[FinishedRound]) -> List[FinishedRound]:
    return sorted(
        rounds,
        key=lambda r: r.ended_at or datetime.min.replace(tzinfo=timezone.utc),
    )


def _average_rating(rounds: Sequence[FinishedRound]) -> Optional[int]:
    ratings = [r.rating for r in rounds if r.rating is not None]
    if not ratings:
        return None
    return _round_half_up(sum(ratings) / len(ratings))


def hole_by_hole(
    rounds: Sequence[FinishedRound], participant_id: str = YOU
) -> List[HoleStats]:
    """Aggregate per-hole scoring for one participant across finished rounds."""

    totals: Dict[int, int] = {}
    stats: Dict[int, HoleStats] = {}
    for finished in rounds:
        for hole_number, strokes in finished.strokes_for(participant_id).items():
            par = finished.pars.get(hole_number, DEFAULT_PAR)
            entry = stats.get(hole_number)
            if entry is None:
                entry = stats[hole_number] = HoleStats(
                    hole_number=hole_number, par=par, best=strokes, worst=strokes
                )
                totals[hole_number] = 0

            totals[hole_number] += strokes
            entry.rounds += 1
            entry.best = min(entry.best, strokes)
            entry.worst = max(entry.worst, strokes)

            relative = strokes - entry.par
            if relative <= -1:
                entry.birdies += 1
            elif relative == 0:
                entry.pars += 1
            elif relative == 1:
                entry.bogeys += 1
            else:
                entry.worse += 1

    for hole_number, entry in stats.items():
        entry.average = totals[hole_number] / entry.rounds
    return [stats[number] for number in sorted(stats)]


def _highlight(entry: HoleStats) -> HoleHighlight:
    return HoleHighlight(
        hole_number=entry.hole_number,
        par=entry.par,
        average_score=entry.average,
        difference=entry.to_par,
    )


def player_insights(rounds: Sequence[FinishedRound]) -> PlayerInsights:
    """Summary statistics for a player's finished rounds.

    ``improvement`` compares the older half of the rounds with the newer half:
    a positive value means recent scores are lower.
    """

    if not rounds:
        return PlayerInsights(total_rounds=0)

    ordered = _chronological(rounds)
    totals = [r.total_strokes for r in ordered]

    improvement = 0.0
    half = len(totals) // 2
    if half:
        older = totals[:half]
        newer = totals[-half:]
        improvement = sum(older) / len(older) - sum(newer) / len(newer)

    holes = hole_by_hole(ordered)
    by_difference = sorted(holes, key=lambda h: (h.to_par, h.hole_number))
    worst_first = sorted(holes, key=lambda h: (-h.to_par, h.hole_number))

    return PlayerInsights(
        total_rounds=len(ordered),
        average_score=sum(totals) / len(totals),
        best_score=min(totals),
        worst_score=max(totals),
        average_rating=_average_rating(ordered),
        improvement=improvement,
        best_holes=[_highlight(h) for h in by_difference[:HIGHLIGHT_COUNT]],
        worst_holes=[_highlight(h) for h in worst_first[:HIGHLIGHT_COUNT]],
    )


def summarize_player(
    player_id: str, name: str, rounds: Sequence[FinishedRound]
) -> PlayerSummary:
    totals = [r.total_strokes for r in rounds]
    return PlayerSummary(
        player_id=player_id,
        name=name,
        total_rounds=len(totals),
        average_score=sum(totals) / len(totals) if totals else 0.0,
        best_score=min(totals) if totals else None,
        average_rating=_average_rating(rounds),
    )


def compare_with_friends(
    me: PlayerSummary, friends: Sequence[PlayerSummary]
) -> FriendComparison:
    """Rank *me* among *friends*; ties keep *me* ahead."""

    everyone = [me, *friends]
    by_rounds = sorted(everyone, key=lambda p: -p.total_rounds)
    # players without rounds have no meaningful average and sort last
    by_average = sorted(everyone, key=lambda p: (p.total_rounds == 0, p.average_score))
    rated = [p for p in everyone if p.average_rating]
    by_rating = sorted(rated, key=lambda p: -(p.average_rating or 0))

    rank_rounds = by_rounds.index(me) + 1
    rank_average = by_average.index(me) + 1
    rank_rating = by_rating.index(me) + 1 if me in by_rating else None

    total_friends = len(friends)

    def _better_than(rank: int) -> int:
        if not total_friends:
            return 0
        return _round_half_up((total_friends - rank + 1) / total_friends * 100)

    return FriendComparison(
        total_friends=total_friends,
        rank_by_rounds=rank_rounds,
        rank_by_average=rank_average,
        rank_by_rating=rank_rating,
        rated_players=len(by_rating),
        better_than_rounds_pct=_better_than(rank_rounds),
        better_than_average_pct=_better_than(rank_average),
        leaderboard=by_rounds,
    )


__all__ = [
    "HoleStats",
    "HoleHighlight",
    "PlayerInsights",
    "PlayerSummary",
    "FriendComparison",
    "hole_by_hole",
    "player_insights",
    "summarize_player",
    "compare_with_friends",
]
