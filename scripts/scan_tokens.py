"""Vet one or more tokens from the command line.

Prints the same JSON the API returns. A single address goes through the
single-scan path, several go through the batch path.

Usage:
    python scripts/scan_tokens.py DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263
    python scripts/scan_tokens.py --file addresses.txt --tiers config/tiers.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from loguru import logger  # noqa: E402

from config.settings import settings  # noqa: E402
from src.parsers.aggregator import TokenDataAggregator  # noqa: E402
from src.utils.logger import setup_logger  # noqa: E402
from src.vetting.exceptions import VettingError  # noqa: E402
from src.vetting.scanner import TokenScanner  # noqa: E402
from src.vetting.tier_classifier import TierClassifier  # noqa: E402
from src.vetting.tiers import load_tier_config  # noqa: E402


def _read_addresses(args: argparse.Namespace) -> list[str]:
    addresses = list(args.addresses)
    if args.file:
        for line in Path(args.file).read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                addresses.append(line)
    return addresses


async def run(args: argparse.Namespace) -> int:
    addresses = _read_addresses(args)
    scanner = TokenScanner(
        TokenDataAggregator.from_settings(settings),
        TierClassifier(load_tier_config(args.tiers)),
        batch_max_size=settings.batch_max_size,
        batch_concurrency=settings.batch_concurrency,
    )
    try:
        if len(addresses) == 1:
            result = await scanner.scan(addresses[0])
            output = result.to_payload()
            code = 0 if result.eligible else 2
        else:
            output = await scanner.scan_batch(addresses)
            code = 0
    except VettingError as e:
        output = e.to_dict()
        code = 1
    finally:
        await scanner.close()

    print(json.dumps(output, indent=2, default=str))
    return code


def main() -> None:
    parser = argparse.ArgumentParser(description="Vet Solana tokens and print tier / risk score")
    parser.add_argument("addresses", nargs="*", help="Token mint addresses")
    parser.add_argument("--file", help="File with one address per line")
    parser.add_argument("--tiers", default=settings.tiers_config_path, help="Tier config JSON")
    parser.add_argument("--verbose", action="store_true", help="Log provider fallbacks")
    args = parser.parse_args()

    setup_logger(level="DEBUG" if args.verbose else "WARNING")
    if not args.addresses and not args.file:
        parser.error("at least one address or --file is required")

    logger.debug(f"Tier config: {args.tiers}")
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
