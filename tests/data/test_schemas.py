"""Tests for pydantic schemas and row validation."""

import pandas as pd
import pytest
from pydantic import ValidationError

from recordaudit.data.schemas import (
    Correction,
    ResultSchema,
    RoundTypeSchema,
    validate_rows,
)


class TestCorrection:
    def test_set_label_sql(self):
        fix = Correction(result_id=7, field="regional_single_record", value="NR")
        assert fix.to_sql() == "UPDATE Results SET regionalSingleRecord = 'NR' WHERE id = 7;"
        assert not fix.is_clear

    def test_clear_label_sql(self):
        fix = Correction(result_id=9, field="regional_average_record")
        assert fix.is_clear
        assert fix.to_sql() == "UPDATE Results SET regionalAverageRecord = NULL WHERE id = 9;"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            Correction(result_id=1, field="best", value="NR")


class TestResultSchema:
    def test_null_label_normalized(self):
        result = ResultSchema.model_validate({
            "id": 1, "competition_id": "Open2024", "event_id": "333",
            "round_type_id": "f", "person_id": "p1", "country_id": "Austria",
            "best": 580, "average": 0,
            "regional_single_record": None, "regional_average_record": "ER",
        })
        assert result.regional_single_record == ""
        assert result.regional_average_record == "ER"

    def test_unknown_label_rejected(self):
        with pytest.raises(ValidationError, match="unknown record label"):
            ResultSchema.model_validate({
                "id": 1, "competition_id": "Open2024", "event_id": "333",
                "round_type_id": "f", "person_id": "p1", "country_id": "Austria",
                "regional_single_record": "XR",
            })


class TestValidateRows:
    def test_valid_rows(self, round_types):
        rows = validate_rows("round_types", round_types, RoundTypeSchema)
        assert [r.id for r in rows] == ["1", "2", "f"]

    def test_invalid_row_names_table_and_id(self):
        frame = pd.DataFrame({"id": ["1", "f"], "rank": [10, "final"]})
        with pytest.raises(ValueError, match=r"round_types \(id=f\)"):
            validate_rows("round_types", frame, RoundTypeSchema)

    def test_nan_treated_as_missing(self):
        frame = pd.DataFrame({"id": ["1"], "rank": [float("nan")]})
        with pytest.raises(ValueError, match="round_types"):
            validate_rows("round_types", frame, RoundTypeSchema)
