"""Heuristic caddie advice built from live round state."""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Tuple

from dgtracker.rounds.engine import RoundScoringEngine
from dgtracker.rounds.models import YOU

from .schemas import AdviceTone, CaddieAdvice, DistanceCategory

DEFAULT_PAR = 3
RECENT_WINDOW = 3
FINAL_STRETCH = 3

# (distance_m, par, hole_distance_m) -> tip
DistanceTemplate = Callable[[int, int, Optional[float]], str]

_DISTANCE_BUCKETS: List[Tuple[float, DistanceCategory]] = [
    (160, "long"),
    (110, "fairway"),
    (60, "approach"),
    (35, "circleTwo"),
    (15, "circleOne"),
]


def distance_category(distance_m: float) -> DistanceCategory:
    for threshold, category in _DISTANCE_BUCKETS:
        if distance_m > threshold:
            return category
    return "tapIn"


def _hole_length(hole_distance: Optional[float]) -> str:
    return f" for this {hole_distance:.0f}m hole" if hole_distance else ""


DISTANCE_TEMPLATES: Dict[DistanceCategory, List[DistanceTemplate]] = {
    "long": [
        lambda d, par, _h: (
            f"You're still {d}m out. Play a measured shot that keeps you in bounds "
            f"and sets up an easy angle on this par {par}."
        ),
        lambda d, _par, h: (
            f"{d}m remaining. Focus on placement, land in a landing zone that opens "
            f"the green{_hole_length(h)}."
        ),
    ],
    "fairway": [
        lambda d, _par, _h: (
            f"{d}m left. Smooth tempo and balanced follow-through, let the disc do "
            "the work."
        ),
        lambda d, par, _h: (
            f"{d}m to go. A controlled fairway shot keeps birdie in play on this "
            f"par {par}."
        ),
    ],
    "approach": [
        lambda d, _par, _h: (
            f"{d}m out. Aim for a safe landing zone on the high side to avoid "
            "rollaways."
        ),
        lambda d, _par, _h: (
            f"Only {d}m remaining. Commit to your release point and leave a "
            "stress-free putt."
        ),
    ],
    "circleTwo": [
        lambda d, _par, _h: (
            f"{d}m, circle two look. Give it height, but respect the comeback putt."
        ),
        lambda d, _par, _h: (
            f"{d}m away. Choose a confident line or chip it close if you're not "
            "feeling the long putt."
        ),
    ],
    "circleOne": [
        lambda d, _par, _h: (
            f"{d}m, inside the circle. Breathe, pick a chain link and commit."
        ),
        lambda d, _par, _h: (
            f"{d}m left. Smooth spin, nose flat, and follow through toward the "
            "target."
        ),
    ],
    "tapIn": [
        lambda d, _par, _h: (
            f"{d}m, tap-in territory! Take the easy par (or birdie) and walk to the "
            "next tee smiling."
        ),
        lambda d, _par, _h: (
            f"Just {d}m. Centre the putter, knock it down, and keep the momentum "
            "rolling."
        ),
    ],
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _over_par_tip(par: int, hole_distance: float) -> str:
    if par == 3:
        if hole_distance > 150:
            return "This is a long par 3. Focus on accuracy over distance."
        return "Short par 3 - aim for the center of the green."
    if par == 4:
        if hole_distance > 300:
            return "Long par 4 - play it as two good shots."
        return "Standard par 4 - focus on hitting the fairway."
    if par == 5:
        return "Par 5 - take your time and avoid big mistakes."
    return ""


def _score_advice(engine: RoundScoringEngine, participant_id: str) -> Tuple[str, AdviceTone]:
    index = engine.current_hole_index
    hole = engine.current_hole
    par = hole.par or DEFAULT_PAR
    holes_played = engine.holes_played
    holes_remaining = engine.hole_count - (index + 1)

    played_total = engine.played_total(participant_id)
    to_par = played_total - engine.played_par()
    average_per_hole = played_total / holes_played if holes_played else 0.0

    played = [engine.get_score(participant_id, i) for i in range(holes_played)]
    recent = played[-RECENT_WINDOW:]
    recent_average = sum(recent) / len(recent) if recent else 0.0
    improving = len(recent) >= 2 and recent[-1] < recent[-2]

    if engine.get_score(participant_id, index) == 1 and par > 1:
        return f"ACE! HOLE-IN-ONE! Incredible shot on this {par}-par hole!", "ace"

    if holes_played == 0:
        return (
            "Start strong! Focus on hitting par on this first hole to build confidence.",
            "motivational",
        )

    if holes_remaining == 0:
        final_to_par = engine.get_to_par(participant_id)
        if final_to_par <= 0:
            return (
                f"Excellent round! You finished {abs(final_to_par)} under par. "
                "Well played!",
                "positive",
            )
        return (
            f"Round complete! You finished {final_to_par} over par. Good effort!",
            "neutral",
        )

    if to_par <= -2:
        return (
            f"You're {abs(to_par)} under par! Keep playing steady - don't get too "
            "aggressive.",
            "positive",
        )

    if to_par >= 5:
        return (
            f"You're {to_par} over par. Focus on making pars - avoid big numbers.",
            "warning",
        )

    if holes_remaining <= FINAL_STRETCH:
        if to_par == 0:
            message = (
                f"Final holes! You're at even par. Make pars on these last "
                f"{holes_remaining} holes to finish even."
            )
        elif to_par < 0:
            message = (
                f"Final stretch! You're {abs(to_par)} under par. Keep making pars "
                "to maintain your lead."
            )
        else:
            target = math.ceil((to_par + holes_remaining) / holes_remaining)
            if target <= par:
                message = (
                    f"Final stretch! You need to average {target} strokes per hole "
                    "to finish under par."
                )
            else:
                message = (
                    f"Final holes! Try to make pars on these last {holes_remaining} "
                    "holes."
                )
        return message, "warning"

    if improving and recent_average < par:
        return (
            "Great improvement! Your recent holes are trending better. Keep this "
            f"momentum on this {par}-par hole.",
            "positive",
        )

    if average_per_hole > par + 1:
        return (
            f"You're averaging {average_per_hole:.1f} strokes per hole. Focus on "
            f"making par on this {par}-par hole.",
            "warning",
        )

    if to_par == 0:
        return (
            "Perfect! You're right on par. Keep playing steady golf for the "
            f"remaining {holes_remaining} holes.",
            "neutral",
        )
    if to_par == 1:
        return (
            f"You're 1 over par. A birdie on this {par}-par hole would bring you "
            "back to even.",
            "neutral",
        )
    if to_par == -1:
        return (
            f"You're 1 under par. A par on this {par}-par hole will maintain your "
            "lead.",
            "positive",
        )
    if to_par > 0:
        tip = _over_par_tip(par, hole.distance_m or 0)
        return f"You're {to_par} over par. {tip}".strip(), "warning"
    return f"You're {abs(to_par)} under par. Keep playing steady golf.", "positive"


def advise(
    engine: RoundScoringEngine,
    participant_id: str = YOU,
    distance_m: Optional[float] = None,
    near_basket: bool = False,
) -> CaddieAdvice:
    """Advice for *participant_id* on the current hole.

    A distance tip is appended only when the player is near the basket and a
    finite distance is known.
    """

    message, tone = _score_advice(engine, participant_id)

    if not near_basket or distance_m is None or not math.isfinite(distance_m):
        return CaddieAdvice(message=message, tone=tone)

    metres = _round_half_up(distance_m)
    category = distance_category(metres)
    templates = DISTANCE_TEMPLATES[category]
    hole = engine.current_hole
    variant = templates[(engine.current_hole_index + metres) % len(templates)]
    tip = variant(metres, hole.par or DEFAULT_PAR, hole.distance_m)
    message = f"{message} {tip}".strip() if message else tip

    if category in ("circleOne", "tapIn"):
        if tone != "ace":
            tone = "positive"
    elif category == "long" and tone == "neutral":
        tone = "motivational"

    return CaddieAdvice(
        message=message, tone=tone, distance_category=category, distance_m=metres
    )


__all__ = ["DISTANCE_TEMPLATES", "advise", "distance_category"]
