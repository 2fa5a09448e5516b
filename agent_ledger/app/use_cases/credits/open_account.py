"""OpenAccount Use Case

Creates a user's account with a zero balance on first sign-in.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.use_cases.errors import internal_error
from agent_ledger.domain.account import Account
from .dtos import OpenAccountCommandDTO, AccountResponseDTO

logger = logging.getLogger(__name__)


class OpenAccount:
    """
    Use Case: Open an account

    Idempotent on the account id: an existing account is returned as is
    with created=False.
    """

    def __init__(self, uow: UnitOfWork, account_repo: AccountRepository):
        self.uow = uow
        self.account_repo = account_repo

    async def execute(self, command: OpenAccountCommandDTO) -> Result[AccountResponseDTO]:
        try:
            if command.account_id:
                existing = await self.account_repo.get_by_id(command.account_id)
                if existing:
                    return Return.ok(self._to_response_dto(existing, created=False))

            account = Account(email=command.email, balance_cents=0, transaction_count=0)
            if command.account_id:
                account.id = command.account_id

            account = await self.account_repo.create(account)
            await self.uow.commit()

            logger.info(f"Opened account {account.id}")
            return Return.ok(self._to_response_dto(account, created=True))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"OpenAccount failed: {e}")
            return Return.err(internal_error("Failed to open account", e))

    @staticmethod
    def _to_response_dto(account: Account, created: bool) -> AccountResponseDTO:
        return AccountResponseDTO(
            account_id=account.id,
            email=account.email,
            balance_cents=account.balance_cents,
            created_at=account.created_at,
            created=created,
        )
