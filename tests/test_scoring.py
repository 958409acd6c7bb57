"""Tests for candidate scoring."""

import pytest

from calorie_tracker.domain.foods import CandidateNutrient, DataType, NutrientCandidate
from calorie_tracker.services.scoring import score_candidate, select_best_candidate


def _candidate(
    description: str, data_type: DataType | None, names: list[str]
) -> NutrientCandidate:
    return NutrientCandidate(
        description=description,
        data_type=data_type,
        nutrients=tuple(
            CandidateNutrient(name=name, value=1.0, unit="G") for name in names
        ),
    )


ALL_FOUR = ["Energy", "Protein", "Carbohydrate, by difference", "Total lipid (fat)"]


def test_foundation_with_all_nutrients_scores_maximum() -> None:
    candidate = _candidate("Rice, white", DataType.FOUNDATION, ALL_FOUR)

    assert score_candidate(candidate) == 200


def test_branded_missing_carbohydrate_scores_75() -> None:
    candidate = _candidate(
        "BRAND RICE", DataType.BRANDED, ["Energy", "Protein", "Total lipid (fat)"]
    )

    assert score_candidate(candidate) == 75


def test_survey_and_unknown_tiers() -> None:
    survey = _candidate("Rice, cooked", DataType.SURVEY, ["Energy"])
    unknown = _candidate("Rice", None, ["Energy", "Protein"])

    assert score_candidate(survey) == 75
    assert score_candidate(unknown) == 50


def test_non_target_nutrients_do_not_score() -> None:
    candidate = _candidate(
        "Rice", DataType.SR_LEGACY, ["Fiber, total dietary", "Iron, Fe"]
    )

    assert score_candidate(candidate) == 100


def test_reference_data_beats_earlier_branded_result() -> None:
    branded = _candidate("BRAND RICE", DataType.BRANDED, ALL_FOUR)
    legacy = _candidate("Rice, white, cooked", DataType.SR_LEGACY, ["Energy"])

    best, score = select_best_candidate([branded, legacy])

    assert best is legacy
    assert score == 125


def test_ties_go_to_first_listed_candidate() -> None:
    first = _candidate("Rice A", DataType.SR_LEGACY, ALL_FOUR)
    second = _candidate("Rice B", DataType.FOUNDATION, ALL_FOUR)

    for _ in range(3):
        best, score = select_best_candidate([first, second])
        assert best is first
        assert score == 200


def test_select_requires_candidates() -> None:
    with pytest.raises(ValueError, match="No candidates"):
        select_best_candidate([])
