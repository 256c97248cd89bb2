"""
CONTRACT 3: Investment Calculator

Input: PlanRequest
Output: InvestmentPlan
"""

from pydantic import BaseModel, Field


class PlanRequest(BaseModel):
    """Compounding plan parameters."""

    investment: float = Field(default=1000.0, ge=0, description="Starting capital")
    profit_margin: float = Field(
        default=2.5, ge=0, description="Profit per trade in percent"
    )
    trades: int = Field(default=10, ge=0, le=1000)
    completed: list[int] = Field(
        default_factory=list, description="Ids of trades already ticked off"
    )


class TradeStep(BaseModel):
    """One compounding step."""

    id: int = Field(..., ge=1)
    amount: float
    profit: float
    total_amount: float
    completed: bool = False


class InvestmentPlan(BaseModel):
    """Full plan with totals."""

    steps: list[TradeStep]
    total_profit: float
    final_amount: float
    profit_per_trade: float
    completed_count: int = 0
