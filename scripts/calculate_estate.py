#!/usr/bin/env python3
"""
Compute an Islamic inheritance distribution and print it as JSON.

Usage:
    python3 scripts/calculate_estate.py --madhab <id> --total <amount> --heir <key=count> [...]

Examples:
    # Husband, father and mother under the Shafi'i school
    python3 scripts/calculate_estate.py --madhab shafii --total 120000 \\
        --heir husband=1 --heir father=1 --heir mother=1

    # Deductions and a bequest, in Kuwaiti dinars
    python3 scripts/calculate_estate.py --madhab hanafi --total 50000 --funeral 1200 \\
        --debts 3000 --will 10000 --currency KWD --heir wife=2 --heir son=1 --heir daughter=2

    # Same heirs under every school
    python3 scripts/calculate_estate.py --compare --total 90000 --heir grandfather=1 --heir full_brother=2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_heir(value: str) -> tuple[str, str]:
    key, sep, count = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected key=count, got {value!r}")
    return key.strip(), count.strip()


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Distribute an estate among heirs according to a madhab.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--madhab", help="Madhab id (shafii, hanafi, maliki, hanbali).")
    target.add_argument(
        "--compare",
        action="store_true",
        help="Run the same estate under every madhab in the rule book.",
    )
    parser.add_argument("--total", required=True, help="Gross estate value.")
    parser.add_argument("--funeral", default="0", help="Funeral expenses (default: 0).")
    parser.add_argument("--debts", default="0", help="Debts owed by the deceased (default: 0).")
    parser.add_argument("--will", default="0", help="Bequest amount, capped at one third (default: 0).")
    parser.add_argument("--currency", default=None, help="ISO 4217 currency code (default: SAR).")
    parser.add_argument(
        "--heir",
        action="append",
        default=[],
        type=_parse_heir,
        metavar="KEY=COUNT",
        help="Heir category and head count; repeat for each category.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Alternative rule book YAML (default: bundled madhabs.yaml).",
    )
    parser.add_argument("--verbose", action="store_true", help="Emit structured logs to stderr.")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()

    from mirath_config import get_rule_book
    from mirath_kernel.domain import Estate
    from mirath_kernel.exceptions import ConfigurationError
    from mirath_kernel.logging_config import configure_logging
    from mirath_services import InheritanceService

    if args.verbose:
        configure_logging(level=logging.DEBUG, stream=sys.stderr)

    try:
        book = get_rule_book(args.config)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    service = InheritanceService(rule_book=book)
    estate = Estate(
        total=args.total,
        funeral=args.funeral,
        debts=args.debts,
        will=args.will,
        currency=args.currency,
    )
    heirs = dict(args.heir)

    if args.compare:
        outcomes = service.compare(estate, heirs)
        payload = {madhab: outcome.result.to_dict() for madhab, outcome in outcomes.items()}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0 if all(o.success for o in outcomes.values()) else 1

    outcome = service.calculate(args.madhab, estate, heirs)
    print(json.dumps(outcome.result.to_dict(), ensure_ascii=False, indent=2))
    if not outcome.success:
        for error in outcome.result.errors:
            print(f"ERROR: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
