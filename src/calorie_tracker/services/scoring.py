"""Candidate scoring for nutrition database search results."""

from collections.abc import Sequence

from calorie_tracker.domain.foods import DataType, NutrientCandidate

ENERGY = "Energy"
PROTEIN = "Protein"
CARBOHYDRATE = "Carbohydrate, by difference"
TOTAL_FAT = "Total lipid (fat)"

TARGET_NUTRIENTS = (ENERGY, PROTEIN, CARBOHYDRATE, TOTAL_FAT)
NUTRIENT_PRESENT_SCORE = 25

# Branded labels often lack full macro data, so curated datasets rank higher.
_TIER_SCORES: dict[DataType, int] = {
    DataType.SR_LEGACY: 100,
    DataType.FOUNDATION: 100,
    DataType.SURVEY: 50,
    DataType.BRANDED: 0,
}


def score_candidate(candidate: NutrientCandidate) -> int:
    """Score a candidate by data tier and target nutrient coverage."""
    score = _TIER_SCORES.get(candidate.data_type, 0) if candidate.data_type else 0
    names = candidate.nutrient_names()
    score += sum(NUTRIENT_PRESENT_SCORE for name in TARGET_NUTRIENTS if name in names)
    return score


def select_best_candidate(
    candidates: Sequence[NutrientCandidate],
) -> tuple[NutrientCandidate, int]:
    """Return the highest-scoring candidate; earlier candidates win ties."""
    if not candidates:
        raise ValueError("No candidates to select from")
    best = candidates[0]
    best_score = score_candidate(best)
    for candidate in candidates[1:]:
        score = score_candidate(candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best, best_score
