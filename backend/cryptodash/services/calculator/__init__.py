"""
Investment calculator (pure computation).
"""

from cryptodash.services.calculator.compounding import (
    build_investment_plan,
    plan_from_request,
)

__all__ = [
    "build_investment_plan",
    "plan_from_request",
]
