"""Payout Rail Interface

The external rail that moves money from the platform to an owner's bank
or connected account.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from agent_ledger.domain.payout import Payout


@dataclass(frozen=True)
class PayoutTransfer:
    transfer_id: str
    payout_id: Optional[str] = None


class PayoutRailError(Exception):
    """Raised by a payout rail when the transfer was not initiated"""


class PayoutRail(ABC):

    @abstractmethod
    def is_configured(self) -> bool:
        pass

    @abstractmethod
    async def initiate_transfer(self, payout: Payout, destination_ref: Optional[str] = None) -> PayoutTransfer:
        """
        Initiate the transfer for a payout

        Args:
            payout: Payout being settled (status processing)
            destination_ref: External destination, overrides the payout's own

        Returns:
            PayoutTransfer with the external references

        Raises:
            PayoutRailError: The rail rejected or failed the transfer
        """
        pass
