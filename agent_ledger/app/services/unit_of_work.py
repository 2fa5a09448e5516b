"""Unit of Work Interface

Defines the transactional boundary of a ledger operation.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Transactional boundary shared by the repositories of one operation

    Everything written through the repositories between two calls becomes
    visible atomically on commit() or is discarded by rollback(). Row locks
    taken with for_update reads are released by either call.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
