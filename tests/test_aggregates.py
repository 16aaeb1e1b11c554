"""Tests for the aggregate engine and percentage normalisation."""

import pytest
from decimal import Decimal

from monthly_ledger.ledger import AggregateEngine, parse_pct
from monthly_ledger.ledger.aggregates import js_round, to_number
from monthly_ledger.models import CATEGORY_NAMES, PartitionSnapshot


def row(eur=0, category="", vnd=0, usd=0, timestamp="15/03/2026 10:00:00", note=""):
    return [timestamp, vnd, eur, usd, category, note]


@pytest.fixture
def engine() -> AggregateEngine:
    return AggregateEngine()


class TestParsePct:
    """Tests for the three-way percentage normalisation."""
    
    @pytest.mark.parametrize("value,expected", [
        ("45%", 45),
        ("12.7%", 12),
        ("-3%", -3),
        (0.07, 7),
        (-0.25, -25),
        (1, 100),
        (12, 12),
        (12.4, 12),
        (0, 0),
        ("45", 0),
        ("abc%", 0),
        (None, 0),
        (True, 0),
        ("9" * 5000 + "%", 0),
        (Decimal("1e400"), 0),
        (Decimal("NaN"), 0),
        (float("inf"), 0),
    ])
    def test_parse_pct(self, value, expected):
        assert parse_pct(value) == expected
    
    def test_fraction_ambiguity(self):
        """Test a fraction of 5.0 is read as 500, not 5."""
        assert parse_pct(5.0) == 500
        assert parse_pct(10) == 10
    
    def test_rounds_half_up(self):
        """Test halves round toward +infinity like Math.round."""
        assert parse_pct(0.125) == 13
        assert js_round(Decimal("-24.5")) == -24
        assert js_round(Decimal("2.5")) == 3
    
    def test_round_stays_bounded(self):
        """Test rounding out-of-range values yields 0 instead of a huge int."""
        assert js_round(Decimal("1e400")) == 0
        assert js_round(Decimal("-1e400")) == 0
        assert js_round("12") == 12


class TestToNumber:
    
    @pytest.mark.parametrize("value,expected", [
        (12, Decimal(12)),
        (2.5, Decimal("2.5")),
        ("12.5", Decimal("12.5")),
        (" 7 ", Decimal(7)),
        ("12abc", Decimal(0)),
        ("", Decimal(0)),
        (None, Decimal(0)),
        ("NaN", Decimal(0)),
        ("1e5000", Decimal(0)),
        (10 ** 400, Decimal(0)),
        ("1.5e3", Decimal(1500)),
    ])
    def test_to_number(self, value, expected):
        assert to_number(value) == expected


class TestTotals:
    
    def test_per_currency_sums(self, engine):
        """Test each currency is summed independently."""
        totals = engine.totals([
            row(vnd=50000, eur=2, usd=1),
            row(vnd=25000, eur=3.5, usd=0),
        ])
        assert totals.vnd == Decimal(75000)
        assert totals.eur == Decimal("5.5")
        assert totals.usd == Decimal(1)
    
    def test_short_and_text_cells(self, engine):
        """Test trimmed rows and text cells count as 0."""
        totals = engine.totals([["15/03/2026 10:00:00", 10], row(eur="n/a")])
        assert totals.vnd == Decimal(10)
        assert totals.eur == Decimal(0)
    
    def test_empty(self, engine):
        assert engine.totals([]).eur == Decimal(0)


class TestCategoryBreakdown:
    
    def test_single_category(self, engine):
        """Test Food=100 of total 100 is 100% and the rest 0."""
        breakdown = engine.category_breakdown([row(eur=100, category="Food")])
        assert list(breakdown) == CATEGORY_NAMES
        assert breakdown["Food"].amount == 100
        assert breakdown["Food"].percent == 100
        for name in CATEGORY_NAMES[1:]:
            assert breakdown[name].amount == 0
            assert breakdown[name].percent == 0
    
    def test_shares(self, engine):
        """Test shares of total EUR."""
        breakdown = engine.category_breakdown([
            row(eur=30, category="Food"),
            row(eur=60, category="Travel"),
            row(eur=10, category="Food"),
        ])
        assert breakdown["Food"].amount == 40
        assert breakdown["Food"].percent == 40
        assert breakdown["Travel"].percent == 60
    
    def test_unknown_category_counts_in_total_only(self, engine):
        """Test free-text categories fall outside every bucket."""
        breakdown = engine.category_breakdown([
            row(eur=50, category="Food"),
            row(eur=50, category="Snacks"),
        ])
        assert breakdown["Food"].percent == 50
        assert sum(stat.amount for stat in breakdown.values()) == 50
    
    def test_exact_match(self, engine):
        """Test category matching is exact."""
        breakdown = engine.category_breakdown([row(eur=10, category="food")])
        assert breakdown["Food"].amount == 0
    
    def test_zero_total(self, engine):
        """Test no division when total EUR is 0."""
        breakdown = engine.category_breakdown([row(vnd=1000, category="Food")])
        assert breakdown["Food"].percent == 0


class TestBudget:
    
    def test_half_remaining(self, engine):
        """Test 800 of 1600 spent leaves 50%."""
        status = engine.budget_status(Decimal(800), 1600)
        assert status.amount == 1600
        assert status.percent == 50
    
    def test_over_budget(self, engine):
        """Test 2000 of 1600 spent is -25%."""
        assert engine.budget_status(Decimal(2000), 1600).percent == -25
    
    def test_nothing_spent(self, engine):
        assert engine.budget_status(Decimal(0), 1600).percent == 100
    
    def test_missing_budget(self, engine):
        """Test an empty budget cell reports 0/0."""
        status = engine.budget_status(Decimal(100), None)
        assert status.amount == 0
        assert status.percent == 0
    
    def test_stats_from_snapshot(self, engine):
        snapshot = PartitionSnapshot(
            name="March 2026",
            rows=[row(eur=400, category="Bills"), row(eur=400, category="Fun")],
            budget_cell=1600,
        )
        stats = engine.stats(snapshot)
        assert stats.budget.percent == 50
        assert stats.categories["Bills"].percent == 50
