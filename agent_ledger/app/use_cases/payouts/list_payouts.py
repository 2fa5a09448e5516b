"""ListPayouts Use Case

Payout history of an account, most recent first.
"""

from typing import List
from libs.result import Result, Return
from agent_ledger.app.repositories.payout_repository import PayoutRepository
from .dtos import PayoutResponseDTO
from .reservation import to_payout_dto


class ListPayouts:

    def __init__(self, payout_repo: PayoutRepository):
        self.payout_repo = payout_repo

    async def execute(self, account_id: str, limit: int = 50) -> Result[List[PayoutResponseDTO]]:
        payouts = await self.payout_repo.get_by_account_id(account_id, limit=limit)
        return Return.ok([to_payout_dto(p) for p in payouts])
