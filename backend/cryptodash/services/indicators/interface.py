"""
Indicator Service Interface

Defines the contract for the per-symbol indicator layer.
"""

from abc import abstractmethod

from cryptodash.services.base import BaseService
from cryptodash.schemas.signals import SymbolSignal


class IndicatorServiceInterface(BaseService[list[str], dict[str, SymbolSignal]]):
    """
    Indicator Service Contract.

    INPUT: list of symbols

    OUTPUT: dict[str, SymbolSignal]
        - Key: symbol name
        - Value: indicator snapshot for that symbol
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: list[str]) -> dict[str, SymbolSignal]:
        """Calculate indicators for every symbol, concurrently."""
        pass

    @abstractmethod
    async def calculate_for_symbol(
        self, symbol: str, interval: str = "15m"
    ) -> SymbolSignal:
        """
        Fetch the series for one symbol and run the indicator engine.

        Never fails for data reasons: a missing or short series yields
        the default (NEUTRAL) result.
        """
        pass

    async def health_check(self) -> bool:
        """Indicator maths is always healthy (pure computation)."""
        return True
