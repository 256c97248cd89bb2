"""
Investment Compounding Calculator

Each trade reinvests the whole running balance at a fixed profit margin.
"""

from typing import Iterable

from cryptodash.schemas.calculator import PlanRequest, TradeStep, InvestmentPlan


def build_investment_plan(
    investment: float,
    profit_margin: float,
    trades: int,
    completed: Iterable[int] = (),
) -> InvestmentPlan:
    """
    Compound `trades` steps of `profit_margin` percent on `investment`.

    Args:
        investment: Starting capital
        profit_margin: Profit per trade in percent
        trades: Number of trades
        completed: Ids (1-based) of trades already done

    Returns:
        InvestmentPlan with one TradeStep per trade and the totals
    """
    done = set(completed)
    current = investment
    total_profit = 0.0
    steps = []

    for trade_id in range(1, trades + 1):
        profit = current * (profit_margin / 100)
        steps.append(
            TradeStep(
                id=trade_id,
                amount=current,
                profit=profit,
                total_amount=current + profit,
                completed=trade_id in done,
            )
        )
        total_profit += profit
        current += profit

    return InvestmentPlan(
        steps=steps,
        total_profit=total_profit,
        final_amount=investment + total_profit,
        profit_per_trade=total_profit / trades if trades else 0.0,
        completed_count=sum(1 for s in steps if s.completed),
    )


def plan_from_request(request: PlanRequest) -> InvestmentPlan:
    return build_investment_plan(
        request.investment,
        request.profit_margin,
        request.trades,
        request.completed,
    )
