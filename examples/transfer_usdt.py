#!/usr/bin/env python3
"""
Example: transfer USDT on Ethereum mainnet

Signs a transfer locally, broadcasts it and waits for the receipt.

Run this example:
    SENDER=0x... PRIVATE_KEY=0x... RECIPIENT=0x... python examples/transfer_usdt.py
"""

import asyncio
import logging
import os

from tokentransfer import Network, OutcomeStatus, TransactionManager, TransferSettings
from tokentransfer.utils import configure_logging


async def main() -> None:
    configure_logging(logging.INFO)

    settings = TransferSettings.for_network(
        Network.MAINNET,
        sender=os.environ["SENDER"],
        rpc_url=os.environ.get("RPC_URL"),
    )
    recipient = os.environ["RECIPIENT"]
    amount = int(os.environ.get("AMOUNT", 1_000 * 10**6))  # USDT has 6 decimals

    print("=" * 60)
    print(f"Sending {amount} base units from {settings.sender} to {recipient}")
    print("=" * 60)

    async with TransactionManager.create(settings, os.environ["PRIVATE_KEY"]) as manager:
        outcome = await manager.try_transfer(recipient, amount)

    if outcome.status is OutcomeStatus.CONFIRMED:
        print(f"Confirmed in block {outcome.receipt.block_number}: {outcome.tx_hash}")
    elif outcome.status is OutcomeStatus.NOT_BROADCAST:
        print(f"Nothing was sent, safe to retry: {outcome.error}")
    else:
        print(f"Broadcast but unconfirmed, recheck {outcome.tx_hash} before retrying: {outcome.error}")


if __name__ == "__main__":
    asyncio.run(main())
