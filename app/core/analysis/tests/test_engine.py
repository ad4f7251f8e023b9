"""
Passenger EDA Engine — Analysis Test Suite
============================================
Tests the pure engine: statistical primitives, per-column aggregators,
histogram binning, group survival, correlation table and report assembly.

Run: pytest app/ -v
"""

import pytest
from typing import Any, Dict, List


# ═══════════════════════════════════════════════════════════════
# TEST FIXTURES
# ═══════════════════════════════════════════════════════════════

def make_row(pid, survived=None, pclass=3, sex="male", age=22.0, sibsp=0,
             parch=0, fare=7.25, embarked="S", with_outcome=True) -> Dict[str, Any]:
    row = {"PassengerId": pid}
    if with_outcome:
        row["Survived"] = survived
    row.update({
        "Pclass": pclass, "Sex": sex, "Age": age, "SibSp": sibsp,
        "Parch": parch, "Fare": fare, "Embarked": embarked,
    })
    return row


def make_train_rows() -> List[Dict[str, Any]]:
    """Six passengers with a realistic spread, including one missing Age."""
    return [
        make_row(1, 0, 3, "male", 22.0, 1, 0, 7.25, "S"),
        make_row(2, 1, 1, "female", 38.0, 1, 0, 71.2833, "C"),
        make_row(3, 1, 3, "female", 26.0, 0, 0, 7.925, "S"),
        make_row(4, 1, 1, "female", 35.0, 1, 0, 53.1, "S"),
        make_row(5, 0, 3, "male", 35.0, 0, 0, 8.05, "S"),
        make_row(6, 0, 3, "male", None, 0, 0, 8.4583, "Q"),
    ]


def make_test_rows() -> List[Dict[str, Any]]:
    return [
        make_row(7, pclass=3, sex="male", age=34.5, fare=7.8292, embarked="Q", with_outcome=False),
        make_row(8, pclass=3, sex="female", age=47.0, sibsp=1, fare=7.0, embarked=None,
                 with_outcome=False),
    ]


def make_session(train_rows=None, test_rows=None):
    from app.core.analysis import AnalysisSession
    return AnalysisSession.from_rows(
        make_train_rows() if train_rows is None else train_rows,
        make_test_rows() if test_rows is None else test_rows,
    )


def make_records(rows, origin="train"):
    from app.core.analysis import Record
    return tuple(Record(origin=origin, values=row) for row in rows)


# ═══════════════════════════════════════════════════════════════
# 1. STATISTICAL PRIMITIVES
# ═══════════════════════════════════════════════════════════════

class TestStatistics:
    """Tests for statistics.py"""

    def test_mean(self):
        from app.core.analysis import mean
        assert mean([1, 2, 3, 4]) == 2.5
        assert mean([7.25]) == 7.25

    def test_mean_empty_raises(self):
        from app.core.analysis import EmptyInputError, mean
        with pytest.raises(EmptyInputError):
            mean([])

    def test_median_even_takes_lower_middle(self):
        from app.core.analysis import median
        assert median([1, 2, 3, 4]) == 2
        assert median([4, 3, 2, 1]) == 2

    def test_median_odd(self):
        from app.core.analysis import median
        assert median([5, 1, 3]) == 3

    def test_median_does_not_mutate_input(self):
        from app.core.analysis import median
        values = [3, 1, 2]
        median(values)
        assert values == [3, 1, 2]

    def test_std_population_divisor(self):
        from app.core.analysis import standard_deviation
        # Population SD of [2, 4, 4, 4, 5, 5, 7, 9] is exactly 2
        assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9], 5.0) == pytest.approx(2.0)

    def test_std_zero_iff_identical(self):
        from app.core.analysis import mean, standard_deviation
        same = [0.1] * 7
        assert standard_deviation(same, mean(same)) == 0.0
        different = [0.1] * 6 + [0.2]
        assert standard_deviation(different, mean(different)) > 0

    def test_std_non_negative(self):
        from app.core.analysis import mean, standard_deviation
        for values in ([1], [-5, 5], [1e6, 1e6 + 1, 3], [0.5, 0.25, 0.125]):
            assert standard_deviation(values, mean(values)) >= 0

    def test_std_computes_mean_when_omitted(self):
        from app.core.analysis import standard_deviation
        assert standard_deviation([1, 3]) == pytest.approx(1.0)

    def test_pearson_self_is_one(self):
        from app.core.analysis import pearson_correlation
        x = [22.0, 38.0, 26.0, 35.0, 35.0]
        assert pearson_correlation(x, x) == 1.0

    def test_pearson_constant_is_zero(self):
        from app.core.analysis import pearson_correlation
        assert pearson_correlation([3, 3, 3], [1, 2, 3]) == 0
        assert pearson_correlation([1, 2, 3], [0.1, 0.1, 0.1]) == 0

    def test_pearson_perfect_negative(self):
        from app.core.analysis import pearson_correlation
        assert pearson_correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_pearson_symmetric_and_bounded(self):
        from app.core.analysis import pearson_correlation
        x = [1, 2, 3, 4, 5, 6]
        y = [2, 1, 4, 3, 7, 5]
        r = pearson_correlation(x, y)
        assert r == pearson_correlation(y, x)
        assert -1.0 <= r <= 1.0

    def test_pearson_length_mismatch(self):
        from app.core.analysis import pearson_correlation
        with pytest.raises(ValueError):
            pearson_correlation([1, 2], [1, 2, 3])


# ═══════════════════════════════════════════════════════════════
# 2. VALUE PREDICATES & RECORDS
# ═══════════════════════════════════════════════════════════════

class TestRecords:
    """Tests for records.py"""

    def test_is_missing(self):
        from app.core.analysis import is_missing
        assert is_missing(None)
        assert is_missing(float("nan"))
        assert is_missing("")
        assert is_missing("   ")
        assert not is_missing(0)
        assert not is_missing("S")

    def test_to_number(self):
        from app.core.analysis import to_number
        assert to_number(22) == 22.0
        assert to_number(" 7.25 ") == 7.25
        assert to_number("abc") is None
        assert to_number(True) is None
        assert to_number(float("inf")) is None
        assert to_number(None) is None

    def test_record_is_read_only(self):
        records = make_records([make_row(1, 0)])
        with pytest.raises(TypeError):
            records[0].values["Age"] = 99
        with pytest.raises(Exception):
            records[0].origin = "test"

    def test_record_rejects_unknown_origin(self):
        from app.core.analysis import Record
        with pytest.raises(ValueError):
            Record(origin="validation", values={})

    def test_merge_order_and_origin(self):
        session = make_session()
        assert session.total_records == 8
        assert [r.origin for r in session.merged] == ["train"] * 6 + ["test"] * 2
        assert [r.get("PassengerId") for r in session.merged] == list(range(1, 9))

    def test_overview(self):
        overview = make_session().overview()
        assert overview["total_records"] == 8
        assert overview["train_records"] == 6
        assert overview["test_records"] == 2
        assert overview["features"] == ["Pclass", "Sex", "Age", "SibSp", "Parch", "Fare", "Embarked"]

    def test_preview_takes_prefix(self):
        rows = make_session().preview(3)
        assert [r["PassengerId"] for r in rows] == [1, 2, 3]
        assert rows[0]["origin"] == "train"

    def test_schema_mismatch_on_train(self):
        from app.core.analysis import SchemaMismatchError
        rows = make_train_rows()
        del rows[2]["Fare"]
        with pytest.raises(SchemaMismatchError) as exc:
            make_session(train_rows=rows)
        assert exc.value.origin == "train"
        assert exc.value.missing_columns == ["Fare"]

    def test_test_rows_need_no_outcome(self):
        session = make_session()
        assert "Survived" not in session.test[0].values

    def test_schema_mismatch_on_test(self):
        from app.core.analysis import SchemaMismatchError
        rows = make_test_rows()
        del rows[0]["Embarked"]
        with pytest.raises(SchemaMismatchError):
            make_session(test_rows=rows)


# ═══════════════════════════════════════════════════════════════
# 3. AGGREGATORS
# ═══════════════════════════════════════════════════════════════

class TestMissingValues:
    """Tests for analyze_missing_values"""

    def test_percentages(self):
        from app.core.analysis import analyze_missing_values
        session = make_session()
        report = analyze_missing_values(session.merged)
        assert report["Age"] == pytest.approx(100 * 1 / 8)
        assert report["Embarked"] == pytest.approx(100 * 1 / 8)
        # Test rows carry no outcome
        assert report["Survived"] == pytest.approx(100 * 2 / 8)
        assert report["Fare"] == 0.0
        assert report["origin"] == 0.0

    def test_numeric_column_rejects_non_numbers(self):
        from app.core.analysis import analyze_missing_values
        rows = make_train_rows()
        rows[0]["Fare"] = "n/a"
        rows[1]["Fare"] = ""
        session = make_session(train_rows=rows)
        report = analyze_missing_values(session.merged)
        assert report["Fare"] == pytest.approx(100 * 2 / 8)

    def test_empty_records(self):
        from app.core.analysis import analyze_missing_values
        assert analyze_missing_values(()) == {}

    def test_consistent_with_unknown_bucket(self):
        from app.core.analysis import analyze_missing_values, summarize_categorical
        session = make_session()
        missing = analyze_missing_values(session.merged)
        categorical = summarize_categorical(session.merged)
        unknown = {c.value: c for c in categorical["Embarked"]}["Unknown"]
        assert unknown.percentage == pytest.approx(missing["Embarked"])


class TestNumericSummary:
    """Tests for summarize_numeric"""

    def test_age_ignores_missing(self):
        from app.core.analysis import summarize_numeric
        session = make_session()
        stats = summarize_numeric(session.merged)
        ages = [22.0, 38.0, 26.0, 35.0, 35.0, 34.5, 47.0]
        assert stats["Age"].count == 7
        assert stats["Age"].mean == pytest.approx(sum(ages) / 7)
        assert stats["Age"].median == 35.0

    def test_column_without_values_is_omitted(self):
        from app.core.analysis import summarize_numeric
        rows = [make_row(1, 0, age=None), make_row(2, 1, age="")]
        session = make_session(train_rows=rows, test_rows=[])
        stats = summarize_numeric(session.merged)
        assert "Age" not in stats
        assert "Fare" in stats

    def test_columns_in_schema_order(self):
        from app.core.analysis import summarize_numeric
        stats = summarize_numeric(make_session().merged)
        assert list(stats) == ["Age", "Fare", "SibSp", "Parch"]


class TestCategoricalSummary:
    """Tests for summarize_categorical"""

    def test_first_encounter_order(self):
        from app.core.analysis import summarize_categorical
        stats = summarize_categorical(make_session().merged)
        assert [c.value for c in stats["Sex"]] == ["male", "female"]
        assert [c.value for c in stats["Embarked"]] == ["S", "C", "Q", "Unknown"]
        assert [c.value for c in stats["Pclass"]] == ["3", "1"]

    def test_percentages_sum_to_100(self):
        from app.core.analysis import summarize_categorical
        stats = summarize_categorical(make_session().merged)
        for col, counts in stats.items():
            assert sum(c.percentage for c in counts) == pytest.approx(100.0)
            assert sum(c.count for c in counts) == 8

    def test_category_labels(self):
        from app.core.analysis.aggregators import category_label
        assert category_label(1.0) == "1"
        assert category_label(2) == "2"
        assert category_label(None) == "Unknown"
        assert category_label("") == "Unknown"
        assert category_label(0) == "0"

    def test_empty_dataset(self):
        from app.core.analysis import summarize_categorical
        stats = summarize_categorical(())
        assert stats == {"Pclass": [], "Sex": [], "Embarked": []}


# ═══════════════════════════════════════════════════════════════
# 4. HISTOGRAMS
# ═══════════════════════════════════════════════════════════════

class TestHistograms:
    """Tests for bin_values / build_histograms"""

    def test_bin_assignment(self):
        from app.core.analysis import bin_values
        bins = bin_values([0, 10, 10.5, 20, 70, 70.01, 80], [10, 20, 30, 40, 50, 60, 70])
        counts = {b.range_label: b.count for b in bins}
        assert counts["<=10"] == 2
        assert counts["10-20"] == 2
        assert counts["60-70"] == 1
        assert counts[">70"] == 2

    def test_labels_in_bin_order(self):
        from app.core.analysis import bin_values
        bins = bin_values([], [10, 20, 30, 40, 50, 100])
        assert [b.range_label for b in bins] == [
            "<=10", "10-20", "20-30", "30-40", "40-50", "50-100", ">100",
        ]
        assert all(b.count == 0 for b in bins)

    @pytest.mark.parametrize("bounds", [[5], [1, 2, 3], [0, 50, 500], [100, 10]])
    def test_counts_sum_to_input_size(self, bounds):
        from app.core.analysis import bin_values
        values = [-3, 0, 0.5, 1, 2.5, 7, 10, 49.9, 50, 51, 512.3292]
        bins = bin_values(values, bounds)
        assert sum(b.count for b in bins) == len(values)

    def test_build_histograms_uses_schema_bins(self):
        from app.core.analysis import build_histograms
        hists = build_histograms(make_session().merged)
        assert set(hists) == {"Age", "Fare"}
        assert sum(b.count for b in hists["Age"]) == 7
        assert sum(b.count for b in hists["Fare"]) == 8
        assert hists["Fare"][-1].range_label == ">100"


# ═══════════════════════════════════════════════════════════════
# 5. GROUP SURVIVAL
# ═══════════════════════════════════════════════════════════════

class TestSurvivalByGroup:
    """Tests for survival_by_group"""

    def test_sex_example(self):
        from app.core.analysis import survival_by_group
        records = make_records([
            {"Sex": "male", "Survived": 0},
            {"Sex": "male", "Survived": 1},
            {"Sex": "female", "Survived": 1},
        ])
        report = survival_by_group(records, "Sex")
        assert report.to_dict() == {
            "male": {"survived": 1, "died": 1},
            "female": {"survived": 1, "died": 0},
        }
        assert list(report.groups) == ["male", "female"]

    def test_missing_outcome_is_skipped(self):
        from app.core.analysis import survival_by_group
        records = make_records([
            {"Sex": "male", "Survived": None},
            {"Sex": "female", "Survived": 1},
        ])
        assert survival_by_group(records, "Sex").to_dict() == {
            "female": {"survived": 1, "died": 0},
        }

    def test_non_positive_outcomes_count_as_died(self):
        from app.core.analysis import survival_by_group
        records = make_records([
            {"Pclass": 1, "Survived": 2},
            {"Pclass": 1, "Survived": "yes"},
            {"Pclass": 1, "Survived": 1.0},
        ])
        assert survival_by_group(records, "Pclass").to_dict() == {
            "1": {"survived": 1, "died": 2},
        }

    def test_pclass_from_session(self):
        from app.core.analysis import survival_by_group
        session = make_session()
        report = survival_by_group(session.train, "Pclass")
        assert report.to_dict() == {
            "3": {"survived": 1, "died": 3},
            "1": {"survived": 2, "died": 0},
        }


# ═══════════════════════════════════════════════════════════════
# 6. CORRELATIONS
# ═══════════════════════════════════════════════════════════════

FEATURES = ["Pclass", "Sex", "Age", "SibSp", "Parch", "Fare", "Embarked", "Survived"]


class TestCorrelation:
    """Tests for correlation.py"""

    def test_full_matrix_shape(self):
        from app.core.analysis import build_correlation_table
        table = build_correlation_table(make_session().train)
        assert table.shape == "full"
        assert table.features == FEATURES
        assert list(table.matrix) == FEATURES
        for a in FEATURES:
            assert list(table.matrix[a]) == FEATURES

    def test_filters_incomplete_records(self):
        from app.core.analysis import build_correlation_table
        table = build_correlation_table(make_session().train)
        # Passenger 6 has no Age
        assert table.sample_size == 5
        assert table.excluded_records == 1

    def test_missing_or_non_numeric_pclass_excludes_record(self):
        from app.core.analysis import build_correlation_table
        rows = make_train_rows() + [
            make_row(10, 1, pclass=None, sex="female", age=30.0),
            make_row(11, 0, pclass="first", age=40.0),
        ]
        table = build_correlation_table(make_session(train_rows=rows).train)
        assert table.sample_size == 5
        assert table.excluded_records == 3

    def test_symmetric_bounded_unit_diagonal(self):
        from app.core.analysis import build_correlation_table
        table = build_correlation_table(make_session().train)
        for a in FEATURES:
            assert table.get(a, a) == 1.0
            for b in FEATURES:
                assert table.get(a, b) == table.get(b, a)
                assert -1.0 <= table.get(a, b) <= 1.0

    def test_constant_feature_correlates_zero(self):
        from app.core.analysis import build_correlation_table
        table = build_correlation_table(make_session().train)
        # Parch is 0 for every complete record
        assert table.get("Parch", "Survived") == 0.0
        assert table.get("Parch", "Parch") == 1.0

    def test_sex_encoding_tracks_survival(self):
        from app.core.analysis import build_correlation_table
        table = build_correlation_table(make_session().train)
        # Every female survived and every male died among complete records
        assert table.get("Sex", "Survived") == pytest.approx(1.0)

    def test_outcome_shape(self):
        from app.core.analysis import build_correlation_table
        session = make_session()
        full = build_correlation_table(session.train, shape="full")
        vector = build_correlation_table(session.train, shape="outcome")
        assert vector.matrix is None
        assert list(vector.with_outcome) == FEATURES
        assert vector.with_outcome["Survived"] == 1.0
        for f in FEATURES:
            assert vector.with_outcome[f] == pytest.approx(full.get(f, "Survived"))
        with pytest.raises(KeyError):
            vector.get("Sex", "Survived")

    def test_unknown_shape(self):
        from app.core.analysis import build_correlation_table
        with pytest.raises(ValueError):
            build_correlation_table(make_session().train, shape="upper")

    def test_encoding_table(self):
        from app.core.analysis import TITANIC_ENCODING
        assert TITANIC_ENCODING.encode("Sex", "male") == 0
        assert TITANIC_ENCODING.encode("Sex", "female") == 1
        assert TITANIC_ENCODING.encode("Sex", None) == 1
        assert TITANIC_ENCODING.encode("Embarked", "C") == 0
        assert TITANIC_ENCODING.encode("Embarked", "Q") == 1
        assert TITANIC_ENCODING.encode("Embarked", "S") == 2
        assert TITANIC_ENCODING.encode("Embarked", None) == 2

    def test_custom_encoding_changes_result(self):
        from app.core.analysis import CategoryEncoding, build_correlation_table
        flipped = CategoryEncoding(
            version="test",
            mappings={"Sex": {"female": 0}, "Embarked": {"C": 0, "Q": 1}},
            defaults={"Sex": 1, "Embarked": 2},
        )
        table = build_correlation_table(make_session().train, encoding=flipped)
        assert table.encoding_version == "test"
        assert table.get("Sex", "Survived") == pytest.approx(-1.0)

    def test_no_complete_records(self):
        from app.core.analysis import build_correlation_table
        rows = [make_row(1, 0, age=None), make_row(2, 1, age=None)]
        table = build_correlation_table(make_session(train_rows=rows).train)
        assert table.sample_size == 0
        assert table.get("Age", "Age") == 1.0
        assert table.get("Age", "Fare") == 0.0


# ═══════════════════════════════════════════════════════════════
# 7. REPORT ASSEMBLY
# ═══════════════════════════════════════════════════════════════

class TestReport:
    """Tests for report.py"""

    def test_all_sections(self):
        from app.core.analysis import build_report
        report = build_report(make_session()).to_dict()
        assert list(report) == [
            "overview", "preview", "missing_values", "numeric_stats",
            "categorical_stats", "histograms", "survival", "correlations",
        ]
        assert len(report["preview"]) == 5
        assert set(report["survival"]) == {"Sex", "Pclass"}
        assert report["correlations"]["shape"] == "full"

    def test_outcome_shape_option(self):
        from app.core.analysis import build_report
        report = build_report(make_session(), correlation_shape="outcome").to_dict()
        assert "with_outcome" in report["correlations"]
        assert "matrix" not in report["correlations"]

    def test_deterministic(self):
        from app.core.analysis import build_report
        session = make_session()
        assert build_report(session).to_dict() == build_report(session).to_dict()

    def test_empty_session_raises(self):
        from app.core.analysis import EmptyDatasetError, build_report
        with pytest.raises(EmptyDatasetError):
            build_report(make_session(train_rows=[], test_rows=[]))

    def test_failure_names_section_and_keeps_partial(self):
        from app.core.analysis import AnalysisComputationError, build_report
        with pytest.raises(AnalysisComputationError) as exc:
            build_report(make_session(), correlation_shape="diagonal")
        assert exc.value.section == "correlations"
        assert "survival" in exc.value.partial
        assert exc.value.status_code == 500
        assert exc.value.to_detail()["section"] == "correlations"
