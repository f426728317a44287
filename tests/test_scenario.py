import datetime as dt

from fedplan.scenario import (
    GenericScenarioMortality,
    MortalityAssumptions,
    MortalitySpec,
    RothConversion,
    RothConversionSchedule,
)


class TestDeepCopy:
    """GenericScenario.deep_copy must produce independent structures."""

    def test_copy_is_equal_but_not_identical(self, base_scenario):
        copy = base_scenario.deep_copy()

        assert copy == base_scenario
        assert copy is not base_scenario
        assert copy.participant_scenarios is not base_scenario.participant_scenarios
        assert copy.participant_scenarios["Alice"] is not base_scenario.participant_scenarios["Alice"]

    def test_mutating_copy_leaves_original(self, base_scenario):
        base_scenario.participant_scenarios["Alice"].roth_conversions = RothConversionSchedule(
            [RothConversion(year=2028, amount=50000.0)]
        )
        base_scenario.mortality = GenericScenarioMortality(
            participants={"Bob": MortalitySpec(death_date=dt.date(2050, 1, 1))},
            assumptions=MortalityAssumptions(survivor_spending_factor=0.8),
        )

        copy = base_scenario.deep_copy()
        copy.participant_scenarios["Alice"].roth_conversions.conversions[0].amount = 1.0
        copy.participant_scenarios["Alice"].ss_start_age = 70
        copy.mortality.assumptions.survivor_spending_factor = 0.5
        copy.mortality.participants["Bob"].death_age = 80

        alice = base_scenario.participant_scenarios["Alice"]
        assert alice.roth_conversions.conversions[0].amount == 50000.0
        assert alice.ss_start_age == 62
        assert base_scenario.mortality.assumptions.survivor_spending_factor == 0.8
        assert base_scenario.mortality.participants["Bob"].death_age is None

    def test_participant_helpers(self, base_scenario):
        assert base_scenario.has_participant("Alice")
        assert not base_scenario.has_participant("Carol")
        assert base_scenario.participant_names() == ["Alice", "Bob"]


class TestScenarioSummary:
    """Derived summary metrics."""

    def test_lifetime_taxes_sums_all_tax_kinds(self, summary_factory):
        summary = summary_factory("s", lifetime_taxes=1000.0)
        assert abs(summary.lifetime_taxes() - 1000.0) < 1e-9

    def test_to_frame_indexed_by_year(self, summary_factory):
        frame = summary_factory("s", lifetime_taxes=200.0, final_tsp_balance=5.0).to_frame()

        assert list(frame.index) == [2028, 2029]
        assert frame.loc[2029, "tsp_balance"] == 5.0
        assert abs(frame["total_tax"].sum() - 200.0) < 1e-9
