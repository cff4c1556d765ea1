import pytest

from backend.core.catalog import (
    CatalogProvider,
    CatalogState,
    build_catalog,
    category_of,
    is_bodyweight_style,
    load_static_catalog,
    lookup,
    metric_type_of,
)
from backend.core.errors import CatalogLoadError
from domain.models import MetricType
from tests.fakes import FakeCatalogSource


@pytest.mark.unit
class TestStaticCatalog:
    """Tests for the built-in catalog."""

    def test_loads_definitions(self):
        catalog = load_static_catalog()
        assert len(catalog) > 20
        assert all(d.id for d in catalog)

    def test_ids_are_unique(self):
        ids = [d.id for d in load_static_catalog()]
        assert len(ids) == len(set(ids))

    def test_every_entry_has_both_locales(self):
        for definition in load_static_catalog():
            assert definition.name_for("es")
            assert definition.name_for("en")

    def test_bench_press_entry(self):
        bench = lookup("bench_press_barbell", load_static_catalog())
        assert bench is not None
        assert bench.name_for("es") == "Press Banca (Barra)"
        assert bench.metric_type == MetricType.STRENGTH
        assert bench.bodyweight is False

    def test_cardio_entries(self):
        running = lookup("running", load_static_catalog())
        assert running is not None
        assert running.is_cardio

    def test_lookup_missing(self):
        assert lookup("nonexistent_exercise", load_static_catalog()) is None


@pytest.mark.unit
class TestBuildCatalog:
    """Tests for turning rows into definitions."""

    def test_flat_rows(self):
        catalog = build_catalog([{"id": "squat", "en": "Squat", "es": "Sentadilla", "type": "strength"}])
        assert catalog[0].display_names == {"en": "Squat", "es": "Sentadilla"}
        assert catalog[0].category == "General"

    def test_skips_rows_without_id(self):
        catalog = build_catalog([{"en": "Nameless"}, {"id": "squat", "en": "Squat"}])
        assert [d.id for d in catalog] == ["squat"]

    def test_skips_duplicate_ids(self):
        catalog = build_catalog([
            {"id": "squat", "en": "Squat"},
            {"id": "squat", "en": "Back Squat"},
        ])
        assert len(catalog) == 1
        assert catalog[0].name_for("en") == "Squat"

    def test_keeps_row_order(self):
        rows = [{"id": "b", "en": "B"}, {"id": "a", "en": "A"}]
        assert [d.id for d in build_catalog(rows)] == ["b", "a"]


@pytest.mark.unit
class TestBodyweightStyle:
    """Tests for bodyweight-style detection."""

    def test_catalog_flag(self):
        catalog = load_static_catalog()
        assert is_bodyweight_style("pull_up", catalog) is True
        assert is_bodyweight_style("dips_chest", catalog) is True
        assert is_bodyweight_style("bench_press_barbell", catalog) is False

    @pytest.mark.parametrize(
        "exercise_id",
        ["Dominadas lastradas", "weighted_pull_up", "chin_up_neutral", "Fondos en paralelas", "ring dips"],
    )
    def test_ad_hoc_bodyweight_names(self, exercise_id):
        assert is_bodyweight_style(exercise_id, ()) is True

    @pytest.mark.parametrize(
        "exercise_id",
        ["cable_pull_up_assist", "machine dips", "face pull", "pull_up_row", "Sled push"],
    )
    def test_ad_hoc_excluded_names(self, exercise_id):
        assert is_bodyweight_style(exercise_id, ()) is False


@pytest.mark.unit
class TestCatalogLookups:
    def test_metric_type_prefers_catalog(self):
        catalog = load_static_catalog()
        assert metric_type_of("running", catalog, MetricType.STRENGTH) == MetricType.CARDIO

    def test_metric_type_uses_reported_for_ad_hoc(self):
        assert metric_type_of("Elliptical", (), MetricType.CARDIO) == MetricType.CARDIO
        assert metric_type_of("Elliptical", ()) == MetricType.STRENGTH

    def test_category(self):
        catalog = load_static_catalog()
        assert category_of("squat_barbell", catalog) == lookup("squat_barbell", catalog).category
        assert category_of("ad hoc", catalog) == "General"


@pytest.mark.unit
class TestCatalogProvider:
    """Tests for the catalog lifecycle."""

    def test_starts_loading_with_static_catalog(self):
        provider = CatalogProvider()
        assert provider.state is CatalogState.LOADING
        assert provider.catalog == load_static_catalog()

    def test_load_success_is_ready(self):
        provider = CatalogProvider()
        snapshot = provider.load(FakeCatalogSource())

        assert snapshot.state is CatalogState.READY
        assert provider.state is CatalogState.READY
        assert [d.id for d in provider.catalog][:2] == ["bench_press", "incline_bench_press"]
        assert snapshot.error is None

    def test_source_error_falls_back(self):
        provider = CatalogProvider()
        snapshot = provider.load(FakeCatalogSource(fail_with=CatalogLoadError("relation does not exist")))

        assert snapshot.state is CatalogState.FALLBACK
        assert provider.catalog == load_static_catalog()
        assert "relation does not exist" in snapshot.error

    def test_unexpected_error_falls_back(self):
        provider = CatalogProvider()
        provider.load(FakeCatalogSource(fail_with=ConnectionError("timeout")))
        assert provider.state is CatalogState.FALLBACK

    def test_empty_source_falls_back(self):
        provider = CatalogProvider()
        snapshot = provider.load(FakeCatalogSource(rows=[]))

        assert snapshot.state is CatalogState.FALLBACK
        assert len(snapshot) == len(load_static_catalog())

    def test_reload_replaces_snapshot(self):
        source = FakeCatalogSource()
        provider = CatalogProvider()
        provider.load(source)
        before = provider.snapshot

        source.seed([{"id": "squat", "en": "Squat", "es": "Sentadilla"}])
        provider.load(source)

        assert [d.id for d in provider.catalog] == ["squat"]
        assert [d.id for d in before.definitions][0] == "bench_press"

    def test_failed_reload_after_ready_uses_static(self):
        source = FakeCatalogSource()
        provider = CatalogProvider()
        provider.load(source)
        source.fail()
        provider.load(source)

        assert provider.state is CatalogState.FALLBACK
        assert provider.catalog == load_static_catalog()

    def test_custom_static_catalog(self):
        static = build_catalog([{"id": "squat", "en": "Squat"}])
        provider = CatalogProvider(static_catalog=static)
        provider.load(FakeCatalogSource(rows=[]))
        assert provider.catalog == static
