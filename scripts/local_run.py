#!/usr/bin/env python3
"""
Local Run Script

Convenience script for fetching and syncing from the command line.

Usage:
    python scripts/local_run.py --students
    python scripts/local_run.py --both --offline
    python scripts/local_run.py --sync
    python scripts/local_run.py --status
"""

import argparse
import asyncio
import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _print_dataset(title: str, records: list, tier) -> None:
    print(f"\n{title} ({len(records)}, source: {tier.value if tier else '-'})")
    print("-" * 60)
    for record in records:
        print(f"  {json.dumps(record.to_payload(), ensure_ascii=False)}")


def main():
    parser = argparse.ArgumentParser(
        description="Fetch roster and candidates, or run a sync cycle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--students", action="store_true", help="Fetch the student roster")
    parser.add_argument("--candidates", action="store_true", help="Fetch the candidate list")
    parser.add_argument("--both", action="store_true", help="Fetch both datasets in one call")
    parser.add_argument("--sync", action="store_true", help="Run a sync cycle")
    parser.add_argument("--status", action="store_true", help="Show connectivity and cache state")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Start with connectivity marked offline (cache/defaults only)",
    )

    args = parser.parse_args()

    # Import after path setup
    from ballotsync.bootstrap import build_services
    from ballotsync.connectivity import ConnectivityMonitor
    from ballotsync.context import RequestContext

    if not any([args.students, args.candidates, args.both, args.sync, args.status]):
        parser.print_help()
        return

    connectivity = ConnectivityMonitor(online=False) if args.offline else None
    services = build_services(connectivity=connectivity)

    if args.status:
        print(json.dumps(services.status(), indent=2, ensure_ascii=False))

    if args.students:
        result = asyncio.run(services.service.load_students())
        _print_dataset("Students", result.students, result.student_tier)

    if args.candidates:
        result = asyncio.run(services.service.load_candidates())
        _print_dataset("Candidates", result.candidates, result.candidate_tier)

    if args.both:
        result = asyncio.run(services.service.load_both())
        _print_dataset("Students", result.students, result.student_tier)
        _print_dataset("Candidates", result.candidates, result.candidate_tier)

    if args.sync:
        ctx = RequestContext.for_cli(operation="sync")
        result = asyncio.run(services.reconciler.sync(ctx))

        print("\nSync Result:")
        print("-" * 60)
        print(f"  Status: {result.status.value}")
        print(f"  Students: {result.students_count}")
        print(f"  Candidates: {result.candidates_count}")
        print(f"  Votes: {services.state.votes}")
        if result.duration_seconds is not None:
            print(f"  Duration: {result.duration_seconds:.2f}s")
        if result.errors:
            print("\nErrors:")
            for error in result.errors[:5]:
                print(f"  - {error}")
            sys.exit(1)

    if services.notifier.visible:
        print(f"\n{services.notifier.banner.message}")


if __name__ == "__main__":
    main()
