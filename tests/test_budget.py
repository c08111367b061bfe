"""
Tests for budget derivation.

Verifies:
- Status boundaries around the stretch threshold
- Unknown within_budget is not treated as over budget
- Utilization rounding and zero handling
- Investment range ordering
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.budget import (
    BudgetInput,
    derive_budget_status,
    derive_budget_utilization,
    derive_investment_range,
)
from core.config import ScoringConfig
from core.models import BudgetStatus, RawAnalysis


def budget(total=100000.0, within=True, remaining=50000.0):
    return BudgetInput(total_investment=total, within_budget=within, budget_remaining=remaining)


# =============================================================================
# Budget status
# =============================================================================

class TestBudgetStatus:
    """Tests for derive_budget_status."""

    def test_no_analysis_is_safe(self):
        assert derive_budget_status(None) is BudgetStatus.SAFE

    def test_not_within_budget(self):
        assert derive_budget_status(budget(within=False, remaining=0)) is BudgetStatus.OVER_BUDGET

    def test_over_budget_ignores_remaining(self):
        assert derive_budget_status(budget(within=False, remaining=90000)) is BudgetStatus.OVER_BUDGET

    def test_just_under_threshold_is_stretch(self):
        assert derive_budget_status(budget(remaining=4999)) is BudgetStatus.STRETCH

    def test_just_over_threshold_is_safe(self):
        assert derive_budget_status(budget(remaining=5001)) is BudgetStatus.SAFE

    def test_exactly_at_threshold_is_safe(self):
        assert derive_budget_status(budget(remaining=5000)) is BudgetStatus.SAFE

    def test_missing_remaining_counts_as_zero(self):
        assert derive_budget_status(budget(remaining=None)) is BudgetStatus.STRETCH

    def test_unknown_within_budget_is_not_over(self):
        """
        A missing within-budget flag is unknown, not a failure.

        Only an explicit False is over budget. A truthiness check
        (`not within_budget`) would mark every missing flag over budget.
        """
        assert derive_budget_status(budget(within=None)) is BudgetStatus.SAFE

    def test_zero_total_is_safe(self):
        assert derive_budget_status(budget(total=0.0, remaining=0)) is BudgetStatus.SAFE

    def test_custom_threshold(self):
        config = ScoringConfig(stretch_threshold=0.10)
        assert derive_budget_status(budget(remaining=8000), config) is BudgetStatus.STRETCH
        assert derive_budget_status(budget(remaining=8000)) is BudgetStatus.SAFE


# =============================================================================
# Budget utilization
# =============================================================================

class TestBudgetUtilization:
    """Tests for derive_budget_utilization."""

    def test_no_analysis(self):
        assert derive_budget_utilization(None) == 0

    def test_zero_total(self):
        assert derive_budget_utilization(budget(total=0.0)) == 0

    def test_rounds_to_integer_percent(self):
        # 300000 / 450000 = 66.67%
        assert derive_budget_utilization(budget(total=300000, remaining=150000)) == 67

    def test_rounds_half_up(self):
        # 1 / 8 = 12.5%
        assert derive_budget_utilization(budget(total=1, remaining=7)) == 13

    def test_fully_used(self):
        assert derive_budget_utilization(budget(remaining=0)) == 100

    def test_missing_remaining(self):
        assert derive_budget_utilization(budget(remaining=None)) == 100

    def test_over_budget_exceeds_hundred(self):
        # Negative remaining: 100000 / 80000 = 125%
        assert derive_budget_utilization(budget(within=False, remaining=-20000)) == 125

    def test_non_positive_max_budget(self):
        assert derive_budget_utilization(budget(remaining=-100000)) == 0

    @pytest.mark.parametrize("total,remaining", [
        (100000, 0), (100000, 1), (250000, 250000), (425000, 12345),
    ])
    def test_within_bounds_when_remaining_non_negative(self, total, remaining):
        utilization = derive_budget_utilization(budget(total=total, remaining=remaining))
        assert 0 <= utilization <= 100


class TestBudgetInput:

    def test_from_missing_analysis(self):
        assert BudgetInput.from_analysis(None) is None

    def test_from_analysis_defaults_total(self):
        analysis = RawAnalysis(id="a1", within_budget=True, budget_remaining=1000)
        result = BudgetInput.from_analysis(analysis)

        assert result.total_investment == 0.0
        assert result.within_budget is True
        assert result.budget_remaining == 1000


# =============================================================================
# Investment range
# =============================================================================

class TestInvestmentRange:
    """Tests for derive_investment_range."""

    def test_spread_from_renovation_estimate(self):
        result = derive_investment_range(450000, 20000, 35000, 60000)

        assert result.low == 435000
        assert result.mid == 450000
        assert result.high == 475000
        assert result.is_ordered

    def test_flat_estimate_is_a_point(self):
        result = derive_investment_range(300000, 10000, 10000, 10000)
        assert result.low == result.mid == result.high == 300000

    def test_no_renovation(self):
        result = derive_investment_range(300000, 0, 0, 0)
        assert (result.low, result.mid, result.high) == (300000, 300000, 300000)

    def test_inverted_estimates_are_reported(self):
        result = derive_investment_range(300000, 40000, 20000, 10000)
        assert not result.is_ordered
