#!/usr/bin/env python3
"""Show the addresses and balances of an imported wallet.

Read-only: derives the identity and queries balances, never sends.

Usage:
    python scripts/check_wallet.py             # prompts for a recovery phrase
    python scripts/check_wallet.py --mode rawKey
    python scripts/check_wallet.py --json
"""

import argparse
import asyncio
import json
import logging
import sys
from getpass import getpass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vaultlink import WalletEngine, setup_logging
from vaultlink.errors import InvalidSecret

logger = logging.getLogger(__name__)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Imported Wallet Check")
    parser.add_argument(
        "--mode",
        type=str,
        default="phrase",
        help="Import mode: phrase (recovery phrase) or rawKey (private key)",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    setup_logging(args.debug)

    prompt = "Recovery phrase: " if args.mode == "phrase" else "Private key: "
    secret = getpass(prompt)

    engine = WalletEngine()
    try:
        identity = engine.derive(args.mode, secret)
    except InvalidSecret as e:
        logger.error(f"Import failed: {e}")
        return 1

    balances = await engine.balances(identity)

    if args.json:
        print(json.dumps({"identity": identity.to_dict(), "balances": balances.to_dict()}, indent=2))
        return 0

    print("=" * 60)
    print(f"Identity: {identity.kind.value}")
    if identity.has_evm:
        print(f"  EVM:    {identity.evm_address}")
    if identity.has_solana:
        print(f"  Solana: {identity.solana_address}")
    print("=" * 60)

    for network, figures in balances.to_dict().items():
        print(f"{network.upper()}:")
        for asset, amount in figures.items():
            print(f"  {asset:<7} {amount}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
