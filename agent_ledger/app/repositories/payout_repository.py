"""Payout Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional, List
from agent_ledger.domain.payout import Payout


class PayoutRepository(ABC):

    @abstractmethod
    async def create(self, payout: Payout) -> Payout:
        pass

    @abstractmethod
    async def get_by_id(self, payout_id: str, for_update: bool = False) -> Optional[Payout]:
        """
        Retrieve payout by ID

        Args:
            payout_id: Payout identifier
            for_update: If True, lock the row so that concurrent processing
                attempts are serialized

        Returns:
            Payout if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, payout: Payout) -> Payout:
        pass

    @abstractmethod
    async def get_by_account_id(self, account_id: str, limit: int = 50) -> List[Payout]:
        """Retrieve payouts of an account, most recent first"""
        pass
