"""
Smoke test for the matching engine.

This script validates that:
1. The packaged configuration and scaler artifact load
2. Nearest-neighbor ranking runs on mock adopters and animals
3. Weighted compatibility scoring produces reasons for every animal
4. Application scoring separates puppies from adults

Usage:
    python scripts/smoke_test.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_mock_animals():
    """Create a small mock catalog."""
    return [
        {
            "id": "a1",
            "name": "Luna",
            "ageMonths": 30,
            "attributes": {
                "size": "MEDIUM",
                "breed": "Mestizo",
                "gender": "FEMALE",
                "energy": "MEDIUM",
                "coexistence": {"children": True, "cats": True, "dogs": True},
            },
            "personality": {"sociability": 5, "energy": 3, "training": 4, "adaptability": 4},
            "compatibility": {"kids": True, "apartment": True},
            "clinicalHistory": {"sterilized": True, "lastVaccination": "2024-03-01"},
            "photos": ["luna1.jpg", "luna2.jpg", "luna3.jpg"],
        },
        {
            "id": "a2",
            "name": "Thor",
            "ageMonths": 48,
            "attributes": {
                "size": "LARGE",
                "breed": "Siberian Husky",
                "gender": "MALE",
                "energy": "HIGH",
                "coexistence": {"children": False, "cats": False, "dogs": True},
            },
            "personality": {"sociability": 2, "energy": 5, "training": 2, "adaptability": 3},
            "clinicalHistory": {"sterilized": False},
            "photos": ["thor.jpg"],
        },
        {
            "id": "a3",
            "name": "Mia",
            "ageMonths": 5,
            "attributes": {
                "size": "SMALL",
                "breed": "Poodle",
                "gender": "FEMALE",
                "energy": "LOW",
                "coexistence": {"children": True, "cats": False, "dogs": False},
            },
            "clinicalHistory": {"conditions": "Otitis"},
            "photos": [],
        },
    ]


def create_mock_adopter():
    """Create mock onboarding answers for an adopter in an apartment."""
    return {
        "preferredSize": "MEDIUM",
        "preferredEnergy": "MEDIUM",
        "hasChildren": True,
        "otherPets": "cat",
        "dwelling": "apartment",
        "experienceLevel": "INTERMEDIATE",
        "activityLevel": "MEDIUM",
        "spaceSize": "MEDIUM",
        "timeAvailable": "MEDIUM",
        "groomingCommitment": "LOW",
        "completed": True,
    }


def create_mock_application():
    """Create a mock application with every answer at its best value."""
    return {
        "familyDecision": "agree",
        "monthlyBudget": "high",
        "allowVisits": "yes",
        "acceptSterilization": "yes",
        "housing": "Departamento",
        "relationAnimals": "positive",
        "travelPlans": "withFamily",
        "behaviorResponse": "trainOrAccept",
        "careCommitment": "fullCare",
    }


def run_smoke_test():
    """Run smoke tests on the matching engine."""

    logger.info("=" * 60)
    logger.info("SMOKE TEST: Matching Engine")
    logger.info("=" * 60)

    from adoption_matching.configs.loader import get_config_value, setup_logging
    from adoption_matching.engine import MatchingEngine
    from adoption_matching.evaluation import check_ranking_consistency, matches_to_dataframe

    engine = MatchingEngine.from_config_file()
    setup_logging(get_config_value(engine.config, "global.log_level", "INFO"))
    animals = create_mock_animals()
    adopter = create_mock_adopter()

    results = {}

    # =========================================================================
    # Nearest-neighbor ranking
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("TEST 1: Nearest-neighbor ranking")
    logger.info("=" * 60)

    try:
        ranking = engine.recommend(adopter, animals, k=2)
        for m in ranking.all_matches:
            logger.info(
                f"  #{m.rank} {m.animal_name}: distance={m.distance:.3f}, "
                f"score={m.score}, top_k={m.is_top_k}"
            )

        issues = check_ranking_consistency(ranking)
        if issues:
            for issue in issues:
                logger.error(f"  {issue}")
            results["knn"] = "FAILED - inconsistent ranking"
        else:
            results["knn"] = "PASSED"

        stats = engine.stats(adopter, animals)
        logger.info(f"  Stats: {stats.to_dict()}")

        explanation = engine.explain(adopter, animals[0])
        logger.info(f"  Differences for {explanation.match.animal_name}: {explanation.feature_differences}")

    except Exception as e:
        logger.error(f"  KNN TEST FAILED: {e}")
        results["knn"] = f"FAILED - {e}"
        import traceback
        traceback.print_exc()

    # =========================================================================
    # Weighted compatibility
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("TEST 2: Weighted compatibility")
    logger.info("=" * 60)

    try:
        scored = engine.compatibility_scores(adopter, animals)
        df = matches_to_dataframe(scored)
        logger.info("\n" + df[["animal_name", "match_score", "distance", "match_reasons"]].to_string())

        if any(not r.match_reasons for r in scored):
            results["compatibility"] = "FAILED - empty reasons"
        else:
            results["compatibility"] = "PASSED"

    except Exception as e:
        logger.error(f"  COMPATIBILITY TEST FAILED: {e}")
        results["compatibility"] = f"FAILED - {e}"
        import traceback
        traceback.print_exc()

    # =========================================================================
    # Application scoring
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("TEST 3: Application scoring")
    logger.info("=" * 60)

    try:
        form = create_mock_application()
        form_no_sterilization = dict(form, acceptSterilization="no")

        puppy = engine.score_application(form_no_sterilization, animals[2])
        adult = engine.score_application(form_no_sterilization, animals[0])
        logger.info(f"  Puppy:  {puppy.percentage}% eligible={puppy.eligible}")
        logger.info(f"  Adult:  {adult.percentage}% eligible={adult.eligible}")

        empty = engine.score_application({}, animals[0])
        logger.info(f"  Empty:  {empty.percentage}% eligible={empty.eligible}")

        if puppy.percentage < adult.percentage and not empty.eligible:
            results["application"] = "PASSED"
        else:
            results["application"] = "FAILED - unexpected percentages"

    except Exception as e:
        logger.error(f"  APPLICATION TEST FAILED: {e}")
        results["application"] = f"FAILED - {e}"
        import traceback
        traceback.print_exc()

    # =========================================================================
    # Summary
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("SMOKE TEST SUMMARY")
    logger.info("=" * 60)

    all_passed = True
    for name, status in results.items():
        logger.info(f"  {name.upper()}: {status}")
        if "FAILED" in status:
            all_passed = False

    if all_passed:
        logger.info("\n  ALL TESTS PASSED")
        return 0
    else:
        logger.error("\n  SOME TESTS FAILED")
        return 1


if __name__ == "__main__":
    sys.exit(run_smoke_test())
