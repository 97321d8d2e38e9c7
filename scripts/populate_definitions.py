"""
Populate Definitions
====================
Warms the definition caches for a list of terms by resolving each one
through the tiered resolver (memory cache, Cosmos DB store, providers).

Run with:
    python scripts/populate_definitions.py ephemeral ubiquitous
    python scripts/populate_definitions.py --file words.txt --refresh
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

# Add the backend directory to the path
BASE_DIR = Path(__file__).parent.parent
BACKEND_DIR = BASE_DIR / "backend"
sys.path.insert(0, str(BACKEND_DIR))

from vocabstudy.services.dictionary import TieredContentResolver, definition_resolver  # noqa: E402


@dataclass
class PopulateStats:
    """Counters for one run"""
    total: int = 0
    resolved: int = 0
    failed: int = 0


def read_terms(args: argparse.Namespace) -> list[str]:
    """Collect terms from the command line and the optional word file."""
    terms = list(args.terms)
    if args.file:
        for line in Path(args.file).read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                terms.append(line)
    # Keep first occurrence order
    return list(dict.fromkeys(terms))


async def populate(
    terms: list[str],
    resolver: TieredContentResolver,
    refresh: bool = False,
    delay: float = 1.0
) -> PopulateStats:
    """Resolve every term, optionally forgetting cached entries first."""
    stats = PopulateStats(total=len(terms))

    for index, term in enumerate(terms, start=1):
        progress = f"[{index}/{len(terms)}]"
        print(f"{progress} Resolving '{term}'...")

        try:
            if refresh:
                await resolver.invalidate(term)
            entry = await resolver.get_definition(term)
        except Exception as e:
            print(f"  ERROR - {e}")
            stats.failed += 1
            continue

        if entry is None:
            print("  NOT FOUND")
            stats.failed += 1
        else:
            senses = sum(len(m.definitions) for m in entry.meanings)
            print(f"  OK - {senses} definition(s) from {entry.source}")
            stats.resolved += 1

        if delay > 0 and index < len(terms):
            await asyncio.sleep(delay)

    return stats


def print_summary(stats: PopulateStats) -> None:
    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"Terms:    {stats.total}")
    print(f"Resolved: {stats.resolved}")
    print(f"Failed:   {stats.failed}")
    print("=" * 60)


def main():
    """Entry point"""
    parser = argparse.ArgumentParser(description="Warm the definition caches")
    parser.add_argument("terms", nargs="*", help="Terms to resolve")
    parser.add_argument("--file", help="File with one term per line")
    parser.add_argument("--refresh", action="store_true", help="Re-resolve terms that are already cached")
    parser.add_argument("--delay", type=float, default=1.0, help="Seconds to wait between terms")
    args = parser.parse_args()

    terms = read_terms(args)
    if not terms:
        parser.error("no terms given")

    print(f"\nDate: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Terms to resolve: {len(terms)}\n")

    stats = asyncio.run(populate(terms, definition_resolver, refresh=args.refresh, delay=args.delay))
    print_summary(stats)

    sys.exit(0 if stats.failed == 0 else 1)


if __name__ == "__main__":
    main()
