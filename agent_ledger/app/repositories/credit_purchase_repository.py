"""Credit Purchase Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from agent_ledger.domain.credit_purchase import CreditPurchase


class CreditPurchaseRepository(ABC):

    @abstractmethod
    async def create(self, purchase: CreditPurchase) -> CreditPurchase:
        pass

    @abstractmethod
    async def get_by_id(self, purchase_id: str, for_update: bool = False) -> Optional[CreditPurchase]:
        """
        Retrieve purchase by ID

        Args:
            purchase_id: Purchase identifier
            for_update: If True, lock the row so that duplicate payment
                confirmations are serialized

        Returns:
            CreditPurchase if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_checkout_session_id(self, checkout_session_id: str) -> Optional[CreditPurchase]:
        pass

    @abstractmethod
    async def update(self, purchase: CreditPurchase) -> CreditPurchase:
        pass
