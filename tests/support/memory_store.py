"""In-memory implementation of the ledger storage interfaces

Each MemorySession is one connection: its unit of work stages writes and
applies them on commit. for_update reads take a per-row asyncio.Lock held
until commit or rollback, so concurrent sessions serialize the same way
row locks do in the database. Every repository call yields to the event
loop first, which lets unlocked code paths interleave and race.
"""

import asyncio
import copy
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from sqlalchemy import inspect
from sqlalchemy.orm import Session, make_transient_to_detached

from agent_ledger.app.repositories import (
    AccountRepository,
    CreditTransactionRepository,
    CreditPurchaseRepository,
    AgentEarningsRepository,
    PayoutRepository,
)
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.domain import Account, AgentEarnings, CreditPurchase, CreditTransaction, Payout
from agent_ledger.domain.base import utc_now


def clone(row):
    return type(row)(**copy.deepcopy(row.model_dump()))


def expire_rows(rows):
    """Leave rows detached with every attribute expired, as a database rollback does"""
    session = Session()
    for row in rows:
        if inspect(row).transient:
            make_transient_to_detached(row)
        session.add(row)
    session.expire_all()
    session.expunge_all()


class InjectedFailure(RuntimeError):
    pass


class MemoryStore:
    TABLES = ("accounts", "credit_transactions", "credit_purchases", "agent_earnings", "payouts")

    def __init__(self):
        self.tables: Dict[str, Dict[str, object]] = {name: {} for name in self.TABLES}
        self._locks = defaultdict(asyncio.Lock)
        self._failures: Dict[str, Exception] = {}
        self.calls: Dict[str, int] = defaultdict(int)

    def fail_on(self, operation: str, exc: Optional[Exception] = None):
        """Make the next call of operation (e.g. 'credit_transactions.create') raise"""
        self._failures[operation] = exc or InjectedFailure(f"injected failure in {operation}")

    async def check(self, operation: str):
        await asyncio.sleep(0)
        self.calls[operation] += 1
        exc = self._failures.pop(operation, None)
        if exc is not None:
            raise exc

    def lock(self, key) -> asyncio.Lock:
        return self._locks[key]

    def session(self) -> "MemorySession":
        return MemorySession(self)

    def seed(self, table: str, row):
        self.tables[table][row.id] = clone(row)
        return clone(row)

    def get(self, table: str, row_id: str):
        row = self.tables[table].get(row_id)
        return clone(row) if row is not None else None

    def all(self, table: str) -> List:
        return [clone(row) for row in self.tables[table].values()]

    def transactions_of(self, account_id: str) -> List[CreditTransaction]:
        rows = [t for t in self.all("credit_transactions") if t.account_id == account_id]
        return sorted(rows, key=lambda t: t.sequence)


class MemoryUnitOfWork(UnitOfWork):
    """
    Identity map plus write set of one connection

    Rows read are cached until the next lock on them; only rows passed to
    stage() are written back on commit.
    """

    def __init__(self, store: MemoryStore):
        self.store = store
        self.cache: Dict[Tuple[str, str], object] = {}
        self.dirty: set = set()
        self.held: List = []
        self.commits = 0
        self.rollbacks = 0

    async def acquire(self, key) -> bool:
        """Take a row lock; returns False when this unit of work already held it"""
        if key in self.held:
            return False
        await self.store.lock(key).acquire()
        self.held.append(key)
        return True

    def forget(self, table: str, row_id: str):
        if (table, row_id) not in self.dirty:
            self.cache.pop((table, row_id), None)

    def read(self, table: str, row_id: str):
        cached = self.cache.get((table, row_id))
        if cached is not None:
            return cached
        row = self.store.tables[table].get(row_id)
        if row is None:
            return None
        row = clone(row)
        self.cache[(table, row_id)] = row
        return row

    def rows(self, table: str) -> List:
        ids = set(self.store.tables[table]) | {row_id for (t, row_id) in self.cache if t == table}
        return [self.read(table, row_id) for row_id in sorted(ids)]

    def stage(self, table: str, row):
        self.cache[(table, row.id)] = row
        self.dirty.add((table, row.id))

    async def commit(self):
        try:
            await self.store.check("uow.commit")
            self._check_sequences()
            for key in self.dirty:
                table, row_id = key
                self.store.tables[table][row_id] = clone(self.cache[key])
            self.commits += 1
        finally:
            self._reset()

    async def rollback(self):
        """Discard staged writes; rows handed out by this unit of work are expired"""
        self.rollbacks += 1
        rows = list(self.cache.values())
        self._reset()
        expire_rows(rows)

    def _check_sequences(self):
        committed = {(t.account_id, t.sequence): t.id for t in self.store.tables["credit_transactions"].values()}
        for table, row_id in self.dirty:
            if table != "credit_transactions":
                continue
            row = self.cache[(table, row_id)]
            other = committed.get((row.account_id, row.sequence))
            if other is not None and other != row_id:
                raise ValueError(f"duplicate sequence {row.sequence} for account {row.account_id}")

    def _reset(self):
        self.cache.clear()
        self.dirty.clear()
        while self.held:
            self.store.lock(self.held.pop()).release()


class MemoryAccountRepository(AccountRepository):

    def __init__(self, uow: MemoryUnitOfWork):
        self.uow = uow
        self.store = uow.store

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        await self.store.check("accounts.get_by_id")
        if for_update and await self.uow.acquire(("accounts", account_id)):
            self.uow.forget("accounts", account_id)
        return self.uow.read("accounts", account_id)

    async def create(self, account: Account) -> Account:
        await self.store.check("accounts.create")
        self.uow.stage("accounts", account)
        return account

    async def update_balance(self, account_id: str, new_balance_cents: int, transaction_count: int) -> None:
        await self.store.check("accounts.update_balance")
        account = self.uow.read("accounts", account_id)
        account.balance_cents = new_balance_cents
        account.transaction_count = transaction_count
        account.updated_at = utc_now()
        self.uow.stage("accounts", account)

    async def get_all(self) -> List[Account]:
        await self.store.check("accounts.get_all")
        return self.uow.rows("accounts")


class MemoryCreditTransactionRepository(CreditTransactionRepository):

    def __init__(self, uow: MemoryUnitOfWork):
        self.uow = uow
        self.store = uow.store

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        await self.store.check("credit_transactions.create")
        self.uow.stage("credit_transactions", transaction)
        return transaction

    async def get_by_id(self, transaction_id: str) -> Optional[CreditTransaction]:
        await self.store.check("credit_transactions.get_by_id")
        return self.uow.read("credit_transactions", transaction_id)

    async def get_by_account_id(self, account_id: str, limit: int = 20, offset: int = 0):
        history = await self.get_history(account_id)
        newest_first = list(reversed(history))
        return newest_first[offset:offset + limit], len(history)

    async def get_history(self, account_id: str) -> List[CreditTransaction]:
        await self.store.check("credit_transactions.get_history")
        rows = [t for t in self.uow.rows("credit_transactions") if t.account_id == account_id]
        return sorted(rows, key=lambda t: t.sequence)

    async def get_transaction_sum_by_account(self, account_id: str) -> int:
        await self.store.check("credit_transactions.get_transaction_sum_by_account")
        return sum(t.amount_cents for t in self.uow.rows("credit_transactions") if t.account_id == account_id)


class MemoryCreditPurchaseRepository(CreditPurchaseRepository):

    def __init__(self, uow: MemoryUnitOfWork):
        self.uow = uow
        self.store = uow.store

    async def create(self, purchase: CreditPurchase) -> CreditPurchase:
        await self.store.check("credit_purchases.create")
        self.uow.stage("credit_purchases", purchase)
        return purchase

    async def get_by_id(self, purchase_id: str, for_update: bool = False) -> Optional[CreditPurchase]:
        await self.store.check("credit_purchases.get_by_id")
        if for_update and await self.uow.acquire(("credit_purchases", purchase_id)):
            self.uow.forget("credit_purchases", purchase_id)
        return self.uow.read("credit_purchases", purchase_id)

    async def get_by_checkout_session_id(self, checkout_session_id: str) -> Optional[CreditPurchase]:
        await self.store.check("credit_purchases.get_by_checkout_session_id")
        for purchase in self.uow.rows("credit_purchases"):
            if purchase.checkout_session_id == checkout_session_id:
                return purchase
        return None

    async def update(self, purchase: CreditPurchase) -> CreditPurchase:
        await self.store.check("credit_purchases.update")
        self.uow.stage("credit_purchases", purchase)
        return purchase


class MemoryAgentEarningsRepository(AgentEarningsRepository):
    """Row locks are keyed by (owner, agent), the table's unique key"""

    def __init__(self, uow: MemoryUnitOfWork):
        self.uow = uow
        self.store = uow.store

    def _owner_rows(self, owner_account_id: str) -> List[AgentEarnings]:
        return [row for row in self.uow.rows("agent_earnings") if row.owner_account_id == owner_account_id]

    def _forget_owner_rows(self, owner_account_id: str):
        for row in list(self._owner_rows(owner_account_id)):
            self.uow.forget("agent_earnings", row.id)

    async def increment(self, agent_id, owner_account_id, creator_earnings_cents, earned_at) -> AgentEarnings:
        await self.store.check("agent_earnings.increment")
        if await self.uow.acquire(("agent_earnings", owner_account_id, agent_id)):
            self._forget_owner_rows(owner_account_id)

        row = next((r for r in self._owner_rows(owner_account_id) if r.agent_id == agent_id), None)
        if row is None:
            row = AgentEarnings(
                agent_id=agent_id,
                owner_account_id=owner_account_id,
                total_earnings_cents=creator_earnings_cents,
                pending_earnings_cents=creator_earnings_cents,
                paid_out_cents=0,
                total_executions=1,
                last_earning_at=earned_at,
                created_at=earned_at,
                updated_at=earned_at,
            )
        else:
            row.total_earnings_cents += creator_earnings_cents
            row.pending_earnings_cents += creator_earnings_cents
            row.total_executions += 1
            row.last_earning_at = earned_at
            row.updated_at = earned_at
        self.uow.stage("agent_earnings", row)
        return row

    async def list_by_owner(self, owner_account_id: str, for_update: bool = False) -> List[AgentEarnings]:
        await self.store.check("agent_earnings.list_by_owner")
        if for_update:
            keys = sorted(
                ("agent_earnings", row.owner_account_id, row.agent_id)
                for row in self.store.tables["agent_earnings"].values()
                if row.owner_account_id == owner_account_id
            )
            acquired = False
            for key in keys:
                acquired = await self.uow.acquire(key) or acquired
            if acquired:
                self._forget_owner_rows(owner_account_id)

        return sorted(self._owner_rows(owner_account_id), key=lambda row: (row.created_at, row.id))

    async def update(self, earnings: AgentEarnings) -> AgentEarnings:
        await self.store.check("agent_earnings.update")
        self.uow.stage("agent_earnings", earnings)
        return earnings

    async def get_all(self) -> List[AgentEarnings]:
        await self.store.check("agent_earnings.get_all")
        return self.uow.rows("agent_earnings")


class MemoryPayoutRepository(PayoutRepository):

    def __init__(self, uow: MemoryUnitOfWork):
        self.uow = uow
        self.store = uow.store

    async def create(self, payout: Payout) -> Payout:
        await self.store.check("payouts.create")
        self.uow.stage("payouts", payout)
        return payout

    async def get_by_id(self, payout_id: str, for_update: bool = False) -> Optional[Payout]:
        await self.store.check("payouts.get_by_id")
        if for_update and await self.uow.acquire(("payouts", payout_id)):
            self.uow.forget("payouts", payout_id)
        return self.uow.read("payouts", payout_id)

    async def update(self, payout: Payout) -> Payout:
        await self.store.check("payouts.update")
        self.uow.stage("payouts", payout)
        return payout

    async def get_by_account_id(self, account_id: str, limit: int = 50) -> List[Payout]:
        await self.store.check("payouts.get_by_account_id")
        rows = [p for p in self.uow.rows("payouts") if p.account_id == account_id]
        return sorted(rows, key=lambda p: p.created_at, reverse=True)[:limit]


class MemorySession:
    """One connection: a unit of work plus repositories bound to it"""

    def __init__(self, store: MemoryStore):
        self.uow = MemoryUnitOfWork(store)
        self.accounts = MemoryAccountRepository(self.uow)
        self.transactions = MemoryCreditTransactionRepository(self.uow)
        self.purchases = MemoryCreditPurchaseRepository(self.uow)
        self.earnings = MemoryAgentEarningsRepository(self.uow)
        self.payouts = MemoryPayoutRepository(self.uow)
