from __future__ import annotations

import pytest
from pydantic import ValidationError

from dgtracker.rating import (
    BandRatingTable,
    DirectRatingTable,
    RatingBand,
    compute_rating,
)
from dgtracker.rating.tables import (
    EKEBERG_RATING_TABLE,
    KROKHOL_RATING_TABLE,
    LANGHUS_RATING_TABLE,
)


@pytest.mark.parametrize("table", [EKEBERG_RATING_TABLE, LANGHUS_RATING_TABLE])
def test_band_endpoints_match_base_and_slope(table: BandRatingTable) -> None:
    for band in table.bands:
        assert compute_rating(table, band.min) == band.base
        assert (
            compute_rating(table, band.max)
            == band.base - (band.max - band.min) * band.increment
        )


@pytest.mark.parametrize("table", [EKEBERG_RATING_TABLE, LANGHUS_RATING_TABLE])
def test_band_rating_is_non_increasing_within_band(table: BandRatingTable) -> None:
    for band in table.bands:
        ratings = [compute_rating(table, s) for s in range(band.min, band.max + 1)]
        assert all(a >= b for a, b in zip(ratings, ratings[1:]))


def test_ekeberg_known_values() -> None:
    assert compute_rating(EKEBERG_RATING_TABLE, 45) == 1002
    assert compute_rating(EKEBERG_RATING_TABLE, 46) == 990
    assert compute_rating(EKEBERG_RATING_TABLE, 30) == 1110 + (36 - 30) * 12


def test_single_band_scenario() -> None:
    table = BandRatingTable(
        bands=[RatingBand(min=36, max=45, base=1110, increment=12)]
    )
    assert compute_rating(table, 45) == 1002
    assert compute_rating(table, 30) == 1182


def test_above_top_band_continues_last_band() -> None:
    # band 86-95 ends at 510 - 9 * 12 = 402
    assert compute_rating(EKEBERG_RATING_TABLE, 96) == 390
    assert compute_rating(EKEBERG_RATING_TABLE, 100) == 402 - 5 * 12


def test_gap_between_bands_continues_lower_band() -> None:
    table = BandRatingTable(
        bands=[
            RatingBand(min=10, max=15, base=40, increment=10),
            RatingBand(min=0, max=5, base=100, increment=10),
        ]
    )
    assert [band.min for band in table.bands] == [0, 10]
    assert compute_rating(table, 5) == 50
    assert compute_rating(table, 7) == 30
    assert compute_rating(table, 10) == 40


def test_overlapping_bands_first_by_min_wins() -> None:
    table = BandRatingTable(
        bands=[
            RatingBand(min=5, max=15, base=500, increment=1),
            RatingBand(min=0, max=10, base=100, increment=1),
        ]
    )
    assert compute_rating(table, 7) == 93


@pytest.mark.parametrize("score", [10, 500, 10_000, -50])
@pytest.mark.parametrize(
    "table", [EKEBERG_RATING_TABLE, LANGHUS_RATING_TABLE, KROKHOL_RATING_TABLE]
)
def test_rating_never_negative(table, score: int) -> None:
    rating = compute_rating(table, score)
    assert rating is not None
    assert rating >= 0


def test_extreme_high_score_clamps_to_zero() -> None:
    assert compute_rating(EKEBERG_RATING_TABLE, 500) == 0
    assert compute_rating(KROKHOL_RATING_TABLE, 500) == 0


def test_direct_table_returns_tabulated_values() -> None:
    for score, rating in KROKHOL_RATING_TABLE.ratings.items():
        assert compute_rating(KROKHOL_RATING_TABLE, score) == rating


def test_direct_table_extrapolates_with_fixed_increment() -> None:
    assert compute_rating(KROKHOL_RATING_TABLE, 52) == 1075 + 8
    assert compute_rating(KROKHOL_RATING_TABLE, 50) == 1075 + 3 * 8
    assert compute_rating(KROKHOL_RATING_TABLE, 113) == 596 - 8
    assert compute_rating(KROKHOL_RATING_TABLE, 200) == 0


def test_direct_table_interpolates_missing_interior_key() -> None:
    table = DirectRatingTable(ratings={20: 200, 10: 100}, increment=5)
    assert list(table.ratings) == [10, 20]
    assert compute_rating(table, 15) == 150
    assert compute_rating(table, 13) == 130
    assert compute_rating(table, 9) == 105


def test_rounding_is_half_away_from_zero() -> None:
    table = BandRatingTable(bands=[RatingBand(min=0, max=10, base=100.5, increment=0)])
    assert compute_rating(table, 3) == 101

    halves = BandRatingTable(bands=[RatingBand(min=0, max=10, base=100, increment=0.5)])
    assert compute_rating(halves, 1) == 100
    assert compute_rating(halves, 3) == 99


def test_missing_table_means_not_rated() -> None:
    assert compute_rating(None, 54) is None


def test_invalid_tables_rejected() -> None:
    with pytest.raises(ValidationError):
        BandRatingTable(bands=[])
    with pytest.raises(ValidationError):
        RatingBand(min=10, max=5, base=100, increment=1)
    with pytest.raises(ValidationError):
        DirectRatingTable(ratings={}, increment=8)
