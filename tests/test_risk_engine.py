"""
Tests for the mask recommendation rules
"""

import itertools

import pytest

from models.risk_engine import (
    CONDITION_RULES,
    ConditionCategory,
    MaskStatus,
    classify_condition,
    is_respiratory_symptom,
    recommend_mask,
)
from utils.constants import DEFAULT_MASK_TYPE, MASK_NOTES, RESPIRATORY_MASK_TYPE


class TestBaseStatus:

    @pytest.mark.parametrize("aqi,status", [
        (89, MaskStatus.RECOMMENDED),
        (149, MaskStatus.RECOMMENDED),
        (150, MaskStatus.RECOMMENDED),
        (199, MaskStatus.RECOMMENDED),
        (200, MaskStatus.STRONGLY_RECOMMENDED),
        (299, MaskStatus.STRONGLY_RECOMMENDED),
        (300, MaskStatus.MANDATORY),
        (480, MaskStatus.MANDATORY),
    ])
    def test_breakpoints_for_healthy_adult(self, aqi, status):
        rec = recommend_mask(aqi, [], [], 30, 20)
        assert rec.status == status
        assert rec.mask_type == DEFAULT_MASK_TYPE
        assert rec.note == MASK_NOTES["moderate"]

    @pytest.mark.parametrize("symptoms,conditions,age", [
        ([], [], 30),
        (["Cough"], [], 30),
        ([], ["Heart disease"], 40),
        ([], [], 70),
        ([], ["Pregnancy"], 28),
    ])
    def test_status_never_decreases_with_aqi(self, symptoms, conditions, age):
        severities = [
            recommend_mask(aqi, symptoms, conditions, age, 20).status.severity
            for aqi in (0, 89, 149, 150, 199, 200, 299, 300, 500)
        ]
        assert severities == sorted(severities)


class TestRespiratoryEscalation:

    def test_cough_is_strictly_more_severe(self):
        plain = recommend_mask(160, [], [], 30, 20)
        coughing = recommend_mask(160, ["Cough"], [], 30, 20)
        assert coughing.status.severity > plain.status.severity
        assert coughing.status == MaskStatus.STRONGLY_RECOMMENDED

    def test_escalates_one_level_only(self):
        rec = recommend_mask(180, ["Shortness of breath"], ["Asthma"], 45, 32)
        assert rec.status == MaskStatus.STRONGLY_RECOMMENDED

    def test_strongly_recommended_becomes_mandatory(self):
        rec = recommend_mask(250, [], ["COPD"], 30, 20)
        assert rec.status == MaskStatus.MANDATORY

    def test_mandatory_is_the_cap(self):
        rec = recommend_mask(350, ["wheezing"], ["emphysema"], 30, 20)
        assert rec.status == MaskStatus.MANDATORY

    def test_valved_mask_and_bronchodilator_note(self):
        rec = recommend_mask(120, ["Chest pain"], [], 30, 20)
        assert rec.mask_type == RESPIRATORY_MASK_TYPE
        assert rec.note.startswith(MASK_NOTES["respiratory"])
        assert rec.note.endswith(MASK_NOTES["moderate"])

    def test_keywords_match_inside_longer_text(self):
        rec = recommend_mask(160, ["Persistent dry cough at night"], [], 30, 20)
        assert rec.status == MaskStatus.STRONGLY_RECOMMENDED
        rec = recommend_mask(160, [], [{"name": "Chronic Bronchitis", "severity": "Mild"}], 30, 20)
        assert rec.status == MaskStatus.STRONGLY_RECOMMENDED

    def test_respiratory_wins_over_vulnerable(self):
        rec = recommend_mask(160, ["cough"], ["Hypertension"], 70, 20)
        assert rec.mask_type == RESPIRATORY_MASK_TYPE
        assert MASK_NOTES["vulnerable"] not in rec.note


class TestVulnerableGroups:

    @pytest.mark.parametrize("conditions,age", [
        (["Heart Disease"], 40),
        (["high blood pressure"], 40),
        (["Type 2 Diabetes"], 40),
        (["Breast cancer (in remission)"], 40),
        (["Pregnant - 2nd trimester"], 29),
        ([], 12),
        ([], 65),
        ([], 5),
    ])
    def test_escalates_recommended_to_strongly(self, conditions, age):
        rec = recommend_mask(160, [], conditions, age, 20)
        assert rec.status == MaskStatus.STRONGLY_RECOMMENDED
        assert rec.mask_type == DEFAULT_MASK_TYPE
        assert rec.note == MASK_NOTES["vulnerable"] + MASK_NOTES["moderate"]

    def test_never_promotes_to_mandatory(self):
        rec = recommend_mask(250, [], ["Heart disease"], 80, 20)
        assert rec.status == MaskStatus.STRONGLY_RECOMMENDED

    def test_mandatory_base_is_kept(self):
        rec = recommend_mask(320, [], ["Heart disease"], 80, 20)
        assert rec.status == MaskStatus.MANDATORY

    def test_boundary_ages_are_not_vulnerable(self):
        assert recommend_mask(160, [], [], 13, 20).status == MaskStatus.RECOMMENDED
        assert recommend_mask(160, [], [], 64, 20).status == MaskStatus.RECOMMENDED


class TestTemperatureGuidance:

    def test_hot(self):
        assert recommend_mask(160, [], [], 30, 36).note == MASK_NOTES["hot"]

    def test_cold(self):
        assert recommend_mask(160, [], [], 30, 9.5).note == MASK_NOTES["cold"]

    @pytest.mark.parametrize("temperature", [10, 35, 22.4, None, float("nan")])
    def test_standard(self, temperature):
        assert recommend_mask(160, [], [], 30, temperature).note == MASK_NOTES["moderate"]

    def test_note_is_never_empty(self):
        grid = itertools.product(
            [-10, 0, 89, 150, 200, 300, 600],
            [[], ["Cough"], ["headache"]],
            [[], ["Asthma"], ["Diabetes"], ["Migraine"]],
            [1, 30, 90],
            [None, -5, 20, 40],
        )
        for aqi, symptoms, conditions, age, temperature in grid:
            rec = recommend_mask(aqi, symptoms, conditions, age, temperature)
            assert rec.note

    def test_is_pure(self):
        args = (210, ["Cough"], ["Asthma"], 50, 38)
        assert recommend_mask(*args) == recommend_mask(*args)


class TestConditionCategories:

    def test_table_covers_every_named_category(self):
        categories = {category for category, _ in CONDITION_RULES}
        assert categories == set(ConditionCategory) - {ConditionCategory.OTHER}

    @pytest.mark.parametrize("name,category", [
        ("Asthma", ConditionCategory.RESPIRATORY),
        ("copd", ConditionCategory.RESPIRATORY),
        ("Coronary heart disease", ConditionCategory.CARDIOVASCULAR),
        ("HYPERTENSION", ConditionCategory.CARDIOVASCULAR),
        ("Diabetes", ConditionCategory.IMMUNE),
        ("Primary immunodeficiency", ConditionCategory.IMMUNE),
        ("pregnancy", ConditionCategory.PREGNANCY),
        ("Migraine", ConditionCategory.OTHER),
        ("", ConditionCategory.OTHER),
    ])
    def test_classify_condition(self, name, category):
        assert classify_condition(name) == category

    def test_objects_and_dicts_are_accepted(self):
        class Condition:
            name = "Emphysema"

        assert classify_condition(Condition()) == ConditionCategory.RESPIRATORY
        assert classify_condition({"name": "Asthma"}) == ConditionCategory.RESPIRATORY
        assert classify_condition(None) == ConditionCategory.OTHER

    def test_symptom_keywords(self):
        assert is_respiratory_symptom("Shortness of Breath")
        assert not is_respiratory_symptom("Headache")
