"""
Unit tests for the monthly progress report.
"""
import json
from datetime import date

import pytest

from backend.core.catalog import load_static_catalog
from backend.core.progress_report import build_progress_report
from tests.fakes import create_workout


@pytest.fixture
def catalog():
    return load_static_catalog()


@pytest.fixture
def workouts():
    return [
        create_workout("2024-04-10", [("Press Banca", [(100, 3)]), ("Sentadilla", [(140, 3)])]),
        create_workout("2024-05-02", [("Press Banca", [(90, 5)]), ("Dominadas", [(0, 10)])], body_weight=70),
        create_workout("2024-05-20T19:00:00", [("Press Banca", [(95, 3)]), ("Correr", [{"distance": 5}])]),
    ]


@pytest.mark.unit
class TestProgressReport:
    def test_volumes(self, catalog, workouts):
        report = build_progress_report(
            workouts, catalog, reference_date=date(2024, 5, 31), current_body_weight=80
        )
        assert report.total_volume_kg == 300 + 420 + 450 + 700 + 285
        assert report.monthly_volume_kg == 450 + 700 + 285
        assert report.training_days == 3
        assert report.monthly_training_days == 2

    def test_max_comparison(self, catalog, workouts):
        report = build_progress_report(
            workouts, catalog, reference_date=date(2024, 5, 1), current_body_weight=80
        )
        by_id = {m.exercise_id: m for m in report.max_comparison}

        assert set(by_id) == {"bench_press_barbell", "pull_up"}
        assert by_id["bench_press_barbell"].global_max == 100
        assert by_id["bench_press_barbell"].monthly_max == 95
        assert by_id["bench_press_barbell"].unit == "kg"
        assert by_id["pull_up"].is_bodyweight
        assert by_id["pull_up"].monthly_max == 10

    def test_sorted_by_monthly_max(self, catalog, workouts):
        report = build_progress_report(
            workouts, catalog, reference_date=date(2024, 5, 15), current_body_weight=80
        )
        maxima = [m.monthly_max for m in report.max_comparison]
        assert maxima == sorted(maxima, reverse=True)

    def test_month_without_training(self, catalog, workouts):
        report = build_progress_report(
            workouts, catalog, reference_date=date(2024, 6, 1), current_body_weight=80
        )
        assert report.monthly_volume_kg == 0
        assert report.max_comparison == []

    def test_empty_history(self, catalog):
        report = build_progress_report([], catalog, reference_date=date(2024, 5, 1), current_body_weight=80)
        assert report.total_volume_kg == 0
        assert report.training_days == 0

    def test_summary(self, catalog, workouts):
        report = build_progress_report(
            workouts, catalog, reference_date=date(2024, 5, 1), current_body_weight=80
        )
        summary = json.loads(json.dumps(report.to_summary(body_weight_kg=72)))

        assert summary["month"] == "2024-05"
        assert summary["monthly_volume_kg"] == 1435
        assert summary["body_weight_kg"] == 72
        assert summary["max_comparison"][0]["exercise"] == "Press Banca (Barra)"
