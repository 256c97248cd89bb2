"""
Tests for the compounding investment plan.
"""

import pytest

from cryptodash.schemas.calculator import PlanRequest
from cryptodash.services.calculator import build_investment_plan, plan_from_request


class TestBuildInvestmentPlan:
    def test_compounds_each_trade(self):
        plan = build_investment_plan(1000, 10, 3)

        assert [s.amount for s in plan.steps] == pytest.approx([1000, 1100, 1210])
        assert [s.profit for s in plan.steps] == pytest.approx([100, 110, 121])
        assert plan.final_amount == pytest.approx(1331)
        assert plan.total_profit == pytest.approx(331)
        assert plan.profit_per_trade == pytest.approx(331 / 3)

    def test_step_ids_start_at_one(self):
        plan = build_investment_plan(500, 2.5, 4)
        assert [s.id for s in plan.steps] == [1, 2, 3, 4]
        assert plan.steps[-1].total_amount == pytest.approx(plan.final_amount)

    def test_zero_trades(self):
        plan = build_investment_plan(1000, 5, 0)

        assert plan.steps == []
        assert plan.final_amount == 1000
        assert plan.profit_per_trade == 0.0

    def test_zero_margin(self):
        plan = build_investment_plan(1000, 0, 5)
        assert plan.total_profit == 0
        assert plan.final_amount == 1000

    def test_completed_trades(self):
        plan = build_investment_plan(1000, 1, 5, completed=[1, 3, 9])

        assert [s.completed for s in plan.steps] == [True, False, True, False, False]
        assert plan.completed_count == 2


def test_plan_from_request_defaults():
    plan = plan_from_request(PlanRequest())

    assert len(plan.steps) == 10
    assert plan.final_amount == pytest.approx(1000 * 1.025 ** 10)
