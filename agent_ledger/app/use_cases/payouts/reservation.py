"""Pending earnings reservation

Moves payout amounts between the pending and paid-out pools of an owner's
AgentEarnings rows. Callers hold the row locks and persist the rows.
"""

import logging
from typing import Dict, List
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.domain.agent_earnings import AgentEarnings
from agent_ledger.domain.payout import Payout
from agent_ledger.domain.base import utc_now
from .dtos import PayoutResponseDTO

logger = logging.getLogger(__name__)


def plan_reservation(rows: List[AgentEarnings], amount_cents: int) -> Dict[str, int]:
    """
    Walk rows in order taking min(remaining, row pending) from each

    Returns:
        Cents to reserve per earnings id (rows with nothing taken are omitted)

    Raises:
        ValueError: The rows do not hold enough pending earnings
    """
    allocations: Dict[str, int] = {}
    remaining = amount_cents
    for row in rows:
        if remaining <= 0:
            break
        take = min(remaining, row.pending_earnings_cents)
        if take <= 0:
            continue
        allocations[row.id] = take
        remaining -= take
    if remaining > 0:
        raise ValueError(f"Pending earnings short by {remaining} cents")
    return allocations


async def apply_reservation(
    earnings_repo: AgentEarningsRepository,
    rows: List[AgentEarnings],
    allocations: Dict[str, int],
) -> None:
    now = utc_now()
    for row in rows:
        take = allocations.get(row.id, 0)
        if not take:
            continue
        row.pending_earnings_cents -= take
        row.paid_out_cents += take
        row.updated_at = now
        await earnings_repo.update(row)


async def release_reservation(earnings_repo: AgentEarningsRepository, payout: Payout) -> int:
    """
    Hand a payout's reservation back to pending earnings

    Returns:
        Cents released
    """
    rows = await earnings_repo.list_by_owner(payout.account_id, for_update=True)
    by_id = {row.id: row for row in rows}
    now = utc_now()
    released = 0

    for earnings_id, amount in (payout.allocations or {}).items():
        row = by_id.get(earnings_id)
        if row is None:
            logger.error(f"Payout {payout.id} allocation references missing earnings row {earnings_id}")
            raise LookupError(f"AgentEarnings {earnings_id} not found")
        row.pending_earnings_cents += amount
        row.paid_out_cents -= amount
        row.updated_at = now
        await earnings_repo.update(row)
        released += amount

    return released


def to_payout_dto(payout: Payout) -> PayoutResponseDTO:
    status = payout.status
    return PayoutResponseDTO(
        payout_id=payout.id,
        account_id=payout.account_id,
        amount_cents=payout.amount_cents,
        status=status.value if hasattr(status, "value") else status,
        description=payout.description,
        failure_reason=payout.failure_reason,
        destination_ref=payout.destination_ref,
        transfer_id=payout.transfer_id,
        external_payout_id=payout.external_payout_id,
        allocations=dict(payout.allocations or {}),
        created_at=payout.created_at,
        processed_at=payout.processed_at,
    )
