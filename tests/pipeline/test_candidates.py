"""Tests for Stage 4 — candidate selection."""

import numpy as np
import pandas as pd
import pytest

from recordaudit.pipeline.candidates import (
    CANDIDATE_COLUMNS,
    enforce_candidate_contract,
    filter_candidates,
    ranking_value,
)
from recordaudit.pipeline.round_dates import empty_round_dates


RESULT_COLUMNS = [
    "id", "competition_id", "event_id", "round_type_id", "person_id", "country_id",
    "best", "average", "regional_single_record", "regional_average_record",
]


def _results(rows):
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


@pytest.fixture
def competitions() -> pd.DataFrame:
    return pd.DataFrame({
        "id": ["Open2024", "Cup2024", "Lost2024"],
        "start_date": ["2024-01-05", "2024-03-02", None],
    })


@pytest.fixture
def round_numbers() -> pd.DataFrame:
    return pd.DataFrame({
        "competition_id": ["Open2024", "Open2024", "Cup2024", "Lost2024"],
        "event_id": ["333", "333", "333", "333"],
        "round_type_id": ["1", "f", "f", "f"],
        "round": [1, 2, 1, 1],
    })


@pytest.fixture
def round_dates() -> pd.DataFrame:
    # Open2024 final finishes a day after the competition starts
    return pd.DataFrame({
        "competition_id": ["Open2024"],
        "event_id": ["333"],
        "round": [2],
        "round_date": pd.to_datetime(["2024-01-06"]),
    })


@pytest.fixture
def national_baselines() -> pd.DataFrame:
    return pd.DataFrame({
        "country_id": ["Austria"],
        "event_id": ["333"],
        "old_single": [600.0],
        "old_average": [np.nan],
    })


def _filter(results, round_numbers, round_dates, competitions, national_baselines):
    return filter_candidates(results, round_numbers, round_dates, competitions, national_baselines)


class TestRankingValue:
    def test_invalid_values_rank_last(self):
        ranked = ranking_value(pd.Series([-1, 0, 500]))
        assert ranked.tolist() == [np.inf, np.inf, 500.0]


class TestRoundDates:
    """Round date resolution and fallback."""

    def test_scheduled_round_uses_schedule_date(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([(1, "Open2024", "333", "f", "p1", "Austria", 580, 0, "", "")])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates.loc[0, "round_date"] == pd.Timestamp("2024-01-06")
        assert candidates.loc[0, "round"] == 2

    def test_unscheduled_round_falls_back_to_start_date(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([(1, "Open2024", "333", "1", "p1", "Austria", 580, 0, "", "")])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates.loc[0, "round_date"] == pd.Timestamp("2024-01-05")

    def test_undated_result_excluded_with_warning(
        self, round_numbers, round_dates, competitions, national_baselines, caplog
    ):
        results = _results([
            (1, "Lost2024", "333", "f", "p1", "Austria", 580, 0, "NR", ""),
            (2, "Cup2024", "333", "f", "p2", "Austria", 590, 0, "", ""),
        ])
        with caplog.at_level("WARNING"):
            candidates = _filter(
                results, round_numbers, empty_round_dates(), competitions, national_baselines
            )
        assert candidates["id"].tolist() == [2]
        assert "neither a round date nor a competition start date" in caplog.text


class TestPruning:
    """Day-best and stored-label retention."""

    def test_keeps_day_best_single_and_average(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 700, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Austria", 600, 650, "", ""),
            (3, "Cup2024", "333", "f", "p3", "Austria", 610, 720, "", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates["id"].tolist() == [1, 2]

    def test_tied_day_best_results_are_all_kept(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 0, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Austria", 580, 0, "", ""),
            (3, "Cup2024", "333", "f", "p3", "Austria", 590, 0, "", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates["id"].tolist() == [1, 2]
        assert candidates["day_best_single"].tolist() == [1.0, 1.0]

    def test_invalid_single_ranks_after_valid_single(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        # Result 1 would rank first if -1 were treated as a time
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", -1, 650, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Austria", 900, 640, "", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates["id"].tolist() == [2]

    def test_stored_label_is_always_kept(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 0, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Austria", 900, 0, "NR", ""),
            (3, "Cup2024", "333", "f", "p3", "Austria", -1, -1, "", "ER"),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates["id"].tolist() == [1, 2, 3]

    def test_result_without_values_or_label_is_dropped(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([(1, "Cup2024", "333", "f", "p1", "Austria", -1, 0, "", "")])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates.empty

    def test_day_groups_are_per_country(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 0, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Belgium", 900, 0, "", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates["id"].tolist() == [1, 2]


class TestBaselinesAttached:
    def test_national_baselines_joined(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 0, "", ""),
            (2, "Cup2024", "333", "f", "p2", "Belgium", 580, 0, "", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert candidates.loc[0, "old_nr_single"] == 600
        assert np.isnan(candidates.loc[1, "old_nr_single"])

    def test_output_passes_contract(
        self, round_numbers, round_dates, competitions, national_baselines
    ):
        results = _results([
            (1, "Cup2024", "333", "f", "p1", "Austria", 580, 640, "", ""),
            (2, "Open2024", "333", "f", "p2", "Austria", 570, 0, "NR", ""),
        ])
        candidates = _filter(results, round_numbers, round_dates, competitions, national_baselines)
        assert list(candidates.columns) == CANDIDATE_COLUMNS
        enforce_candidate_contract(candidates)  # Should not raise


class TestCandidateContract:
    def test_empty_candidate_raises(self, make_candidates):
        candidates = make_candidates([
            {"id": 1, "round_date": "2024-01-05", "best": -1, "average": 0},
        ])[CANDIDATE_COLUMNS]
        with pytest.raises(AssertionError, match="no valid value and no stored label"):
            enforce_candidate_contract(candidates)

    def test_duplicate_ids_raise(self, make_candidates):
        candidates = make_candidates([
            {"id": 1, "round_date": "2024-01-05", "best": 580},
            {"id": 1, "round_date": "2024-01-05", "best": 580},
        ])[CANDIDATE_COLUMNS]
        with pytest.raises(AssertionError, match="duplicate"):
            enforce_candidate_contract(candidates)

    def test_missing_column_raises(self, make_candidates):
        candidates = make_candidates([{"id": 1, "round_date": "2024-01-05", "best": 580}])
        with pytest.raises(AssertionError, match="Column mismatch"):
            enforce_candidate_contract(candidates.drop(columns=["old_nr_single"]))
