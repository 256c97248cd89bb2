"""
Investment Calculator API Endpoints
"""

from fastapi import APIRouter

from cryptodash.schemas.calculator import PlanRequest, InvestmentPlan
from cryptodash.services.calculator import plan_from_request

router = APIRouter()


@router.post("/plan", response_model=InvestmentPlan)
async def build_plan(request: PlanRequest):
    """
    Compound a starting investment over a number of trades.

    Each trade earns `profit_margin` percent of the running amount.
    """
    return plan_from_request(request)
