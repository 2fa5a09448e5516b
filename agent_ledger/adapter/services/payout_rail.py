"""Payout Rail Implementations

SimulatedPayoutRail fabricates transfer references for development and
tests. StripePayoutRail moves the money with a Stripe Connect transfer.
"""

import asyncio
import logging
import random
import string
import time
from typing import Optional
import stripe
from agent_ledger.app.services.payout_rail import PayoutRail, PayoutRailError, PayoutTransfer
from agent_ledger.domain.payout import Payout

logger = logging.getLogger(__name__)


def _simulated_ref(prefix: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


class SimulatedPayoutRail(PayoutRail):
    """
    Payout rail that never leaves the process

    Returns tr_<ms>_<rand> / po_<ms>_<rand> references. configured=False
    mimics a missing rail configuration.
    """

    def __init__(self, configured: bool = True):
        self.configured = configured

    def is_configured(self) -> bool:
        return self.configured

    async def initiate_transfer(self, payout: Payout, destination_ref: Optional[str] = None) -> PayoutTransfer:
        transfer = PayoutTransfer(transfer_id=_simulated_ref("tr"), payout_id=_simulated_ref("po"))
        logger.info(
            f"Simulated transfer {transfer.transfer_id} of {payout.amount_cents} cents "
            f"for payout {payout.id}"
        )
        return transfer


class StripePayoutRail(PayoutRail):
    """
    Payout rail backed by Stripe Connect transfers

    destination_ref is the connected account id (acct_...). The blocking
    Stripe client runs in a worker thread.
    """

    def __init__(self, secret_key: str, currency: str = "usd"):
        self.secret_key = secret_key
        self.currency = currency

    def is_configured(self) -> bool:
        return bool(self.secret_key)

    async def initiate_transfer(self, payout: Payout, destination_ref: Optional[str] = None) -> PayoutTransfer:
        destination = destination_ref or payout.destination_ref
        if not destination:
            raise PayoutRailError(f"Payout {payout.id} has no destination account")

        try:
            transfer = await asyncio.to_thread(
                stripe.Transfer.create,
                api_key=self.secret_key,
                amount=payout.amount_cents,
                currency=self.currency,
                destination=destination,
                transfer_group=payout.id,
                metadata={"payout_id": payout.id, "account_id": payout.account_id},
                idempotency_key=f"payout-{payout.id}",
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe transfer failed for payout {payout.id}: {e}")
            raise PayoutRailError(getattr(e, "user_message", None) or str(e)) from e

        logger.info(f"Stripe transfer {transfer.id} created for payout {payout.id}")
        return PayoutTransfer(transfer_id=transfer.id, payout_id=getattr(transfer, "destination_payment", None))


def create_payout_rail(config) -> PayoutRail:
    """Build the payout rail selected by PAYOUT_RAIL"""
    rail = (config.PAYOUT_RAIL or "simulated").lower()

    if rail == "stripe":
        return StripePayoutRail(config.STRIPE_SECRET_KEY, currency=config.DEFAULT_CURRENCY)
    if rail == "simulated":
        return SimulatedPayoutRail()

    raise ValueError(f"Unknown payout rail: {config.PAYOUT_RAIL}")
