"""Unit tests for norm computation.

Tests the NormCalculator including:
- Most-frequent scalar values with first-seen tie breaking
- Type-aware bucketing (0 vs "0", True vs 1)
- Topic counting and the max_topics_in_norms cut-off
- Structured norms where nulls and unknown protection do not vote
"""

import pytest

from repo_norms.analysis import NormCalculator, compute_norms
from repo_norms.config import FieldConfig
from repo_norms.config.models import ReportSettings
from repo_norms.extraction import FieldExtractor

ENABLED = {"enabled": True, "enforce_admins": True}
DISABLED = {"enabled": False}
UNKNOWN = {"enabled": None, "error": "No permission to view branch protection"}


@pytest.fixture
def fields():
    """One field of each kind."""
    return FieldConfig.from_entries(
        ["has_wiki", "topics", "security_and_analysis", "branch_protection"]
    )


@pytest.fixture
def calculator(fields):
    return NormCalculator(fields)


def scalar_norm(values):
    """Norm of a single scalar field over the given values."""
    fields = FieldConfig.from_entries(["value"])
    return compute_norms([{"value": value} for value in values], fields)["value"]


class TestScalarNorms:
    """Test scalar norm aggregation."""

    def test_most_frequent_value_wins(self):
        assert scalar_norm([False, False, True]) is False

    def test_tie_goes_to_first_seen(self):
        """Test equal counts resolve to the value encountered first."""
        assert scalar_norm(["b", "a", "a", "b"]) == "b"
        assert scalar_norm(["a", "b", "b", "a"]) == "a"

    def test_null_is_a_voting_bucket(self):
        """Test absent values count as one null bucket and can win."""
        fields = FieldConfig.from_entries(["homepage"])

        norms = compute_norms([{}, {"homepage": None}, {"homepage": "https://x"}], fields)

        assert norms["homepage"] is None

    def test_types_are_not_merged(self):
        """Test 0 and "0" are counted separately."""
        assert scalar_norm([0, "0", "0"]) == "0"
        assert scalar_norm(["0", 0, 0]) == 0

    def test_boolean_and_number_are_not_merged(self):
        """Test True and 1 are counted separately."""
        norm = scalar_norm([True, 1, 1])

        assert norm == 1
        assert not isinstance(norm, bool)

    def test_native_type_kept(self):
        """Test the norm is the native value, not its string form."""
        assert scalar_norm([3, 3, 4]) == 3
        assert scalar_norm([True]) is True

    def test_empty_input(self):
        assert scalar_norm([]) is None


class TestMultisetNorms:
    """Test topic norm aggregation."""

    def test_topics_counted_across_records(self, calculator):
        """Test each topic occurrence is counted, most frequent first."""
        configs = [
            {"topics": ["a", "b"]},
            {"topics": ["a", "c"]},
            {"topics": ["a", "b", "d"]},
        ]

        norms = calculator.compute(configs)

        assert norms["topics"] == [
            {"topic": "a", "count": 3},
            {"topic": "b", "count": 2},
            {"topic": "c", "count": 1},
            {"topic": "d", "count": 1},
        ]

    def test_null_topics_ignored(self, calculator):
        """Test records without a topic list contribute nothing."""
        norms = calculator.compute([{"topics": None}, {}, {"topics": ["a"]}])

        assert norms["topics"] == [{"topic": "a", "count": 1}]

    def test_max_topics_limit(self, fields):
        """Test only the K most frequent topics are kept."""
        calculator = NormCalculator(fields, ReportSettings(max_topics_in_norms=2))
        configs = [{"topics": ["x", "y", "z"]}, {"topics": ["z", "y"]}, {"topics": ["z"]}]

        norms = calculator.compute(configs)

        assert norms["topics"] == [{"topic": "z", "count": 3}, {"topic": "y", "count": 2}]

    def test_zero_max_topics(self, fields):
        calculator = NormCalculator(fields, ReportSettings(max_topics_in_norms=0))

        assert calculator.compute([{"topics": ["a"]}])["topics"] == []

    def test_no_topics_at_all(self, calculator):
        assert calculator.compute([{"topics": []}, {"topics": []}])["topics"] == []


class TestStructuredNorms:
    """Test security and protection norm aggregation."""

    def test_security_nulls_do_not_vote(self, calculator):
        """Test a single security object beats any number of nulls."""
        security = {"advanced_security": "enabled", "secret_scanning": "enabled"}
        configs = [
            {"security_and_analysis": None},
            {"security_and_analysis": None},
            {"security_and_analysis": security},
        ]

        assert calculator.compute(configs)["security_and_analysis"] == security

    def test_security_all_null(self, calculator):
        configs = [{"security_and_analysis": None}, {}]

        assert calculator.compute(configs)["security_and_analysis"] is None

    def test_key_order_does_not_split_votes(self, calculator):
        """Test objects with the same content but different key order count together."""
        first = {"advanced_security": "disabled", "secret_scanning": "enabled"}
        reordered = {"secret_scanning": "enabled", "advanced_security": "disabled"}
        other = {"advanced_security": "enabled", "secret_scanning": "enabled"}
        configs = [
            {"security_and_analysis": other},
            {"security_and_analysis": first},
            {"security_and_analysis": reordered},
        ]

        assert calculator.compute(configs)["security_and_analysis"] == first

    def test_unknown_protection_does_not_vote(self, calculator):
        """Test descriptors with an unknown state are excluded from the vote."""
        configs = [
            {"branch_protection": UNKNOWN},
            {"branch_protection": UNKNOWN},
            {"branch_protection": UNKNOWN},
            {"branch_protection": DISABLED},
        ]

        assert calculator.compute(configs)["branch_protection"] == DISABLED

    def test_protection_majority(self, calculator):
        configs = [
            {"branch_protection": ENABLED},
            {"branch_protection": DISABLED},
            {"branch_protection": ENABLED},
        ]

        assert calculator.compute(configs)["branch_protection"] == ENABLED

    def test_descriptor_without_enabled_key_votes(self, calculator):
        """Test only an explicit null "enabled" keeps a descriptor out of the vote."""
        configs = [
            {"branch_protection": {"required": 1}},
            {"branch_protection": {"required": 1}},
            {"branch_protection": DISABLED},
        ]

        assert calculator.compute(configs)["branch_protection"] == {"required": 1}

    def test_protection_all_unknown(self, calculator):
        configs = [{"branch_protection": UNKNOWN}, {}]

        assert calculator.compute(configs)["branch_protection"] is None

    def test_norm_is_independent_copy(self, calculator):
        """Test mutating the norm does not alter the record configs."""
        configs = [{"branch_protection": {"enabled": True, "restrictions": {"users": []}}}]

        norms = calculator.compute(configs)
        norms["branch_protection"]["restrictions"]["users"].append("someone")

        assert configs[0]["branch_protection"]["restrictions"]["users"] == []


class TestSampleSnapshotNorms:
    """Test norms over the bundled sample snapshot."""

    @pytest.fixture
    def norms(self, default_fields, active_records):
        configs = FieldExtractor(default_fields).extract_all(active_records)
        return NormCalculator(default_fields).compute(configs)

    def test_every_field_has_a_norm(self, norms, default_fields):
        assert list(norms) == default_fields.names

    def test_scalar_norms(self, norms):
        assert norms["has_wiki"] is False
        assert norms["private"] is True
        assert norms["default_branch"] == "main"
        assert norms["license"] == "MIT License"

    def test_topics_norm(self, norms):
        assert norms["topics"] == [
            {"topic": "python", "count": 3},
            {"topic": "service", "count": 2},
            {"topic": "frontend", "count": 1},
            {"topic": "tooling", "count": 1},
            {"topic": "bash", "count": 1},
        ]

    def test_security_norm(self, norms):
        assert norms["security_and_analysis"] == {
            "advanced_security": "enabled",
            "secret_scanning": "enabled",
            "secret_scanning_push_protection": "enabled",
        }

    def test_protection_norm(self, norms, active_records):
        assert norms["branch_protection"] == active_records[0]["branch_protection"]

    def test_norms_are_deterministic(self, default_fields, active_records):
        """Test the same input yields identical norms on every run."""
        extractor = FieldExtractor(default_fields)

        first = compute_norms(extractor.extract_all(active_records), default_fields)
        second = compute_norms(extractor.extract_all(active_records), default_fields)

        assert first == second
