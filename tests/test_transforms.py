import datetime as dt

import pytest

from fedplan.scenario import RothConversion
from fedplan.transform import (
    AdjustTSPRate,
    DelaySSClaim,
    EnableRothConversion,
    ModifyRothConversion,
    ModifyTSPStrategy,
    PostponeRetirement,
    RemoveRothConversion,
    SetMortalityDate,
    SetRetirementDate,
    SetSurvivorSpendingFactor,
    SetTSPTargetIncome,
    SetTSPTransferMode,
    TransformError,
    add_months,
)


class TestAddMonths:
    """Calendar month arithmetic with end-of-month clamping."""

    def test_plain_addition(self):
        assert add_months(dt.date(2027, 6, 15), 12) == dt.date(2028, 6, 15)

    def test_clamps_to_month_end(self):
        assert add_months(dt.date(2027, 1, 31), 1) == dt.date(2027, 2, 28)
        assert add_months(dt.date(2027, 8, 31), 6) == dt.date(2028, 2, 29)

    def test_negative_offsets(self):
        assert add_months(dt.date(2027, 3, 31), -1) == dt.date(2027, 2, 28)
        assert add_months(dt.date(2027, 6, 30), -24) == dt.date(2025, 6, 30)


class TestRetirementTransforms:
    """postpone_retirement / set_retirement_date."""

    def test_postpone_moves_date_and_keeps_base(self, base_scenario):
        result = PostponeRetirement("Alice", 12).apply(base_scenario)

        assert result.participant_scenarios["Alice"].retirement_date == dt.date(2028, 6, 30)
        assert base_scenario.participant_scenarios["Alice"].retirement_date == dt.date(2027, 6, 30)

    def test_postpone_rejects_negative_months(self, base_scenario):
        with pytest.raises(TransformError, match="non-negative"):
            PostponeRetirement("Alice", -1).validate(base_scenario)

    def test_postpone_requires_retirement_date(self, base_scenario):
        base_scenario.participant_scenarios["Alice"].retirement_date = None
        with pytest.raises(TransformError, match="no retirement date"):
            PostponeRetirement("Alice", 6).validate(base_scenario)

    def test_unknown_and_empty_participant(self, base_scenario):
        with pytest.raises(TransformError, match="not found"):
            PostponeRetirement("Carol", 6).validate(base_scenario)
        with pytest.raises(TransformError, match="cannot be empty"):
            SetRetirementDate("", dt.date(2030, 1, 1)).validate(base_scenario)

    def test_set_retirement_date_requires_date(self, base_scenario):
        with pytest.raises(TransformError):
            SetRetirementDate("Alice", None).validate(base_scenario)

    def test_error_string_format(self, base_scenario):
        with pytest.raises(TransformError) as exc_info:
            PostponeRetirement("Alice", -3).validate(base_scenario)

        err = exc_info.value
        assert err.transform_name == "postpone_retirement"
        assert err.operation == "validate"
        assert str(err) == "transform postpone_retirement (validate): months must be non-negative, got -3"


class TestSocialSecurityAndTSP:
    """delay_ss_claim and the TSP strategy transforms."""

    @pytest.mark.parametrize("age", [61, 71])
    def test_ss_age_out_of_range(self, base_scenario, age):
        with pytest.raises(TransformError):
            DelaySSClaim("Alice", age).validate(base_scenario)

    def test_delay_ss(self, base_scenario):
        result = DelaySSClaim("Alice", 70).apply(base_scenario)
        assert result.participant_scenarios["Alice"].ss_start_age == 70

    def test_modify_strategy_clears_rate(self, base_scenario):
        result = ModifyTSPStrategy("Alice", "variable_percentage").apply(base_scenario)

        alice = result.participant_scenarios["Alice"]
        assert alice.tsp_withdrawal_strategy == "variable_percentage"
        assert alice.tsp_withdrawal_rate is None

    def test_modify_strategy_preserve_rate(self, base_scenario):
        result = ModifyTSPStrategy("Alice", "variable_percentage", preserve_rate=True).apply(base_scenario)
        assert result.participant_scenarios["Alice"].tsp_withdrawal_rate == 0.04

    def test_modify_strategy_rejects_unknown(self, base_scenario):
        with pytest.raises(TransformError, match="invalid TSP strategy"):
            ModifyTSPStrategy("Alice", "yolo").validate(base_scenario)

    @pytest.mark.parametrize("rate", [0.0, -0.01, 0.21])
    def test_rate_bounds(self, base_scenario, rate):
        with pytest.raises(TransformError):
            AdjustTSPRate("Alice", rate).validate(base_scenario)

    def test_rate_upper_bound_inclusive(self, base_scenario):
        AdjustTSPRate("Alice", 0.20).validate(base_scenario)

    def test_rate_requires_rate_based_strategy(self, base_scenario):
        with pytest.raises(TransformError, match="percentage-based"):
            AdjustTSPRate("Bob", 0.05).validate(base_scenario)

    def test_target_income_requires_need_based(self, base_scenario):
        with pytest.raises(TransformError, match="need_based"):
            SetTSPTargetIncome("Alice", 4000.0).validate(base_scenario)

        result = SetTSPTargetIncome("Bob", 4000.0).apply(base_scenario)
        assert result.participant_scenarios["Bob"].tsp_withdrawal_target_monthly == 4000.0


class TestRothConversionTransforms:
    """Enable, modify and remove Roth conversions."""

    def test_enable_creates_schedule(self, base_scenario):
        result = EnableRothConversion("Alice", [RothConversion(2028, 50000.0), RothConversion(2029, 40000.0)]).apply(
            base_scenario
        )

        assert result.participant_scenarios["Alice"].roth_conversions.years() == [2028, 2029]
        assert base_scenario.participant_scenarios["Alice"].roth_conversions is None

    def test_enable_validation(self, base_scenario):
        with pytest.raises(TransformError, match="amount must be positive"):
            EnableRothConversion("Alice", [RothConversion(2028, 0.0)]).validate(base_scenario)
        with pytest.raises(TransformError, match="year must be between"):
            EnableRothConversion("Alice", [RothConversion(2101, 100.0)]).validate(base_scenario)
        with pytest.raises(TransformError, match="invalid source"):
            EnableRothConversion("Alice", [RothConversion(2028, 100.0, source="roth_ira")]).validate(base_scenario)

    def test_modify_and_remove(self, base_scenario):
        enabled = EnableRothConversion("Alice", [RothConversion(2028, 50000.0)]).apply(base_scenario)

        modified = ModifyRothConversion("Alice", 2028, 75000.0).apply(enabled)
        assert modified.participant_scenarios["Alice"].roth_conversions.conversions[0].amount == 75000.0
        assert enabled.participant_scenarios["Alice"].roth_conversions.conversions[0].amount == 50000.0

        removed = RemoveRothConversion("Alice", 2028).apply(modified)
        assert removed.participant_scenarios["Alice"].roth_conversions is None

    def test_modify_requires_existing_year(self, base_scenario):
        with pytest.raises(TransformError, match="no Roth conversions"):
            ModifyRothConversion("Alice", 2028, 100.0).validate(base_scenario)

        enabled = EnableRothConversion("Alice", [RothConversion(2028, 50000.0)]).apply(base_scenario)
        with pytest.raises(TransformError, match="year 2030"):
            RemoveRothConversion("Alice", 2030).validate(enabled)


class TestMortalityTransforms:
    """Mortality settings are created lazily."""

    def test_set_mortality_date(self, base_scenario):
        result = SetMortalityDate("Bob", dt.date(2045, 3, 1)).apply(base_scenario)

        assert result.mortality.participants["Bob"].death_date == dt.date(2045, 3, 1)
        assert base_scenario.mortality is None

    def test_survivor_spending_factor(self, base_scenario):
        result = SetSurvivorSpendingFactor(0.8).apply(base_scenario)
        assert result.mortality.assumptions.survivor_spending_factor == 0.8

        with pytest.raises(TransformError):
            SetSurvivorSpendingFactor(0.0).validate(base_scenario)
        with pytest.raises(TransformError):
            SetSurvivorSpendingFactor(1.1).validate(base_scenario)

    def test_tsp_transfer_mode(self, base_scenario):
        result = SetTSPTransferMode("survivor_inherits").apply(base_scenario)
        assert result.mortality.assumptions.tsp_spousal_transfer == "survivor_inherits"

        with pytest.raises(TransformError, match="invalid TSP transfer mode"):
            SetTSPTransferMode("split").validate(base_scenario)
