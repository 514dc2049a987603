"""Tests for break-length computation and bank bookkeeping."""

import math

import pytest

from third_time.errors import ConfigurationError
from third_time.state.bank import Bank
from third_time.state.planner import IntervalPlanner, break_length


class TestBreakLengthFormula:
    """Test the pure formula."""

    def test_proportional_to_work(self):
        assert break_length(1500, 1 / 3, 0, 60) == pytest.approx(500)

    def test_bank_shifts_break(self):
        assert break_length(1500, 1 / 3, -120, 60) == pytest.approx(380)
        assert break_length(1500, 1 / 3, 200, 60) == pytest.approx(700)

    def test_floored_at_minimum(self):
        assert break_length(0, 0, -1000, 60) == 60
        assert break_length(30, 1 / 3, 0, 60) == 60

    @pytest.mark.parametrize("actual_work", [0, 1, 59.5, 1500, 36000])
    @pytest.mark.parametrize("ratio", [0, 0.2, 1 / 3, 1.0])
    @pytest.mark.parametrize("bank_seconds", [-100000, -120, 0, 300])
    @pytest.mark.parametrize("minimum", [0, 60, 300])
    def test_never_below_minimum(self, actual_work, ratio, bank_seconds, minimum):
        assert break_length(actual_work, ratio, bank_seconds, minimum) >= minimum


class TestValidation:
    """Test ratio and minimum validation."""

    @pytest.mark.parametrize("ratio", [0, 0.0, 1 / 3, 2, 0.5])
    def test_accepts_non_negative_numbers(self, ratio):
        IntervalPlanner.validate_ratio(ratio)

    @pytest.mark.parametrize("ratio", [-0.1, -1, "0.33", None, True, math.nan, math.inf])
    def test_rejects_invalid_ratio(self, ratio):
        with pytest.raises(ConfigurationError) as exc_info:
            IntervalPlanner.validate_ratio(ratio)
        assert exc_info.value.field == "break_to_work_ratio"

    @pytest.mark.parametrize("minimum", [-60, "60", None])
    def test_rejects_invalid_minimum(self, minimum):
        with pytest.raises(ConfigurationError) as exc_info:
            IntervalPlanner.validate_minimum(minimum)
        assert exc_info.value.field == "minimum_break_length"


class TestComputeBreakLength:
    """Test the planner's bank-consuming computation."""

    def test_bank_zero_after_computation(self):
        bank = Bank(250)
        planner = IntervalPlanner(bank)

        length = planner.compute_break_length(1500, 1 / 3, 60)

        assert length == pytest.approx(750)
        assert bank.seconds == 0.0

    def test_negative_bank_discarded_when_floored(self):
        """A debt swallowed by the floor is not carried forward again."""
        bank = Bank(-1000)
        planner = IntervalPlanner(bank)

        assert planner.compute_break_length(1500, 0, 60) == 60
        assert bank.seconds == 0.0

    def test_first_interval_ignores_stale_bank(self):
        bank = Bank(900)
        planner = IntervalPlanner(bank)

        length = planner.compute_break_length(1500, 1 / 3, 60, first_interval=True)

        assert length == pytest.approx(500)
        assert bank.seconds == 0.0

    def test_invalid_ratio_leaves_bank_untouched(self):
        bank = Bank(42)
        planner = IntervalPlanner(bank)

        with pytest.raises(ConfigurationError):
            planner.compute_break_length(1500, -1, 60, first_interval=True)

        assert bank.seconds == 42

    def test_negative_work_treated_as_zero(self):
        planner = IntervalPlanner(Bank())
        assert planner.compute_break_length(-5, 1 / 3, 60) == 60


class TestRecordBreakOutcome:
    """Test early/late break bookkeeping."""

    def test_no_pending_break_is_noop(self):
        bank = Bank(37)
        planner = IntervalPlanner(bank)

        assert planner.record_break_outcome(None, 999) is None
        assert bank.seconds == 37

    def test_early_end_credits_bank(self):
        bank = Bank()
        planner = IntervalPlanner(bank)

        delta = planner.record_break_outcome(500, 300)

        assert delta == 200
        assert bank.seconds == 200

    def test_late_end_debits_bank(self):
        bank = Bank()
        planner = IntervalPlanner(bank)

        delta = planner.record_break_outcome(500, 620)

        assert delta == -120
        assert bank.seconds == -120

    def test_accumulates_on_existing_balance(self):
        bank = Bank(50)
        IntervalPlanner(bank).record_break_outcome(300, 330)
        assert bank.seconds == 20

    def test_reset_bank(self):
        bank = Bank(50)
        IntervalPlanner(bank).reset_bank("killed")
        assert bank.seconds == 0.0
