#!/usr/bin/env python3
"""Record consistency audit.

Recomputes every NR / CR / WR of the target year (and later) and reports each
result whose stored record label disagrees. The archive is never modified;
use --sql to write the corrections as a script for a separate update step.

Usage:
    python scripts/ops/run_audit.py --year 2024
    python scripts/ops/run_audit.py --year 2024 --end-year 2024 --sql fixes.sql
    python scripts/ops/run_audit.py --year 2024 --jobs 4

Environment:
    RECORDAUDIT_DB_PATH: Path to SQLite archive (default: storage/archive.sqlite)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add src to path if running as script
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from recordaudit.config import DEFAULT_DB_PATH, DEFAULT_N_JOBS, DEFAULT_YEAR, AuditConfig
from recordaudit.pipeline import AuditPipeline

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def main():
    """Run the audit and write the discrepancy report."""
    parser = argparse.ArgumentParser(description="Audit stored record labels")
    parser.add_argument("--year", type=int, default=DEFAULT_YEAR, help="Target year")
    parser.add_argument("--end-year", type=int, default=None, help="Last year audited (default: no limit)")
    parser.add_argument("--db", default=None, help="Database path (default: from config)")
    parser.add_argument("--output", default=None, help="CSV report path (default: storage/reports/)")
    parser.add_argument("--sql", default=None, help="Also write corrections as an SQL script")
    parser.add_argument("--jobs", type=int, default=DEFAULT_N_JOBS, help="Parallel evaluation workers")
    args = parser.parse_args()

    try:
        config = AuditConfig(year=args.year, end_year=args.end_year, n_jobs=args.jobs)
        pipeline = AuditPipeline.run(config, db_path=args.db or DEFAULT_DB_PATH)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Audit failed: {e}")
        return 1

    report = pipeline.discrepancies

    print("\n" + "=" * 70)
    print(f"RECORD AUDIT {config.year}" + ("" if config.end_year is None else f"-{config.end_year}"))
    print("=" * 70)
    print(f"Candidates evaluated: {len(pipeline.candidates):,}")
    print(f"Inconsistent results: {len(report):,}")
    print(f"Corrections:          {len(pipeline.corrections):,}")

    if not report.empty:
        print("\n" + "-" * 70)
        for _, row in report.head(20).iterrows():
            actions = ", ".join(a for a in (row["single_action"], row["average_action"]) if a)
            print(f"  {row['result_id']:>10}  {row['event_id']:8} {row['country_id']:16} {actions}")
        if len(report) > 20:
            print(f"  ... {len(report) - 20} more")
        print("-" * 70)

    output_path = pipeline.save_report(args.output)
    print(f"\nSaved to {output_path}")
    if args.sql:
        print(f"SQL saved to {pipeline.save_sql(args.sql)}")
    print("=" * 70 + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
