"""Record audit pipeline.

End-to-end pipeline that orchestrates:
1. Data gathering (ArchiveReader -> ArchiveSnapshot)
2. Round dates and round numbers
3. Pre-year baselines
4. Candidate selection
5. National, continental and world record evaluation (per event)
6. Label resolution
7. Discrepancy report
8. Artifact saving (CSV report, SQL corrections)

Every step is a pure function of the previous steps' outputs; running the
pipeline twice on the same archive yields the same report.

Usage:
    from recordaudit.pipeline import AuditPipeline

    # Full pipeline
    AuditPipeline.run(AuditConfig(year=2024))

    # Or step by step
    pipeline = AuditPipeline(AuditConfig(year=2024))
    pipeline.gather_data()
    pipeline.resolve_rounds()
    pipeline.snapshot_baselines()
    pipeline.select_candidates()
    pipeline.evaluate()
    pipeline.report()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from joblib import Parallel, delayed

from recordaudit.config import DEFAULT_DB_PATH, REPORTS_DIR, AuditConfig
from recordaudit.data import ArchiveReader, ArchiveSnapshot, Correction
from recordaudit.pipeline.baselines import Baselines, compute_baselines
from recordaudit.pipeline.candidates import enforce_candidate_contract, filter_candidates
from recordaudit.pipeline.discrepancies import build_discrepancies, collect_corrections
from recordaudit.pipeline.labels import resolve_labels
from recordaudit.pipeline.national import evaluate_national_records
from recordaudit.pipeline.regional import evaluate_regional_records
from recordaudit.pipeline.round_dates import resolve_round_dates
from recordaudit.pipeline.round_numbers import assign_round_numbers

logger = logging.getLogger(__name__)


def _evaluate_event(
    candidates: pd.DataFrame,
    countries: pd.DataFrame,
    baselines: Baselines,
) -> pd.DataFrame:
    national = evaluate_national_records(candidates)
    return evaluate_regional_records(
        national, countries, baselines.continental, baselines.world
    )


def evaluate_records(
    candidates: pd.DataFrame,
    countries: pd.DataFrame,
    baselines: Baselines,
    n_jobs: int = 1,
) -> pd.DataFrame:
    """Run national then regional evaluation, one independent task per event.

    Regional evaluation of an event needs that event's national flags only,
    so events can be evaluated in parallel. Output order does not depend on
    n_jobs.
    """
    events = sorted(candidates["event_id"].unique())
    if not events:
        return _evaluate_event(candidates, countries, baselines)

    frames = Parallel(n_jobs=n_jobs)(
        delayed(_evaluate_event)(
            candidates[candidates["event_id"] == event_id],
            countries,
            baselines.for_event(event_id),
        )
        for event_id in events
    )
    return pd.concat(frames, ignore_index=True).sort_values("id").reset_index(drop=True)


class AuditPipeline:
    """End-to-end record consistency audit."""

    def __init__(
        self,
        config: Optional[AuditConfig] = None,
        db_path: Optional[str] = None,
    ) -> None:
        self.config = config or AuditConfig()
        self.db_path = db_path or DEFAULT_DB_PATH

        # State
        self.snapshot: Optional[ArchiveSnapshot] = None
        self.round_dates: Optional[pd.DataFrame] = None
        self.round_numbers: Optional[pd.DataFrame] = None
        self.baselines: Optional[Baselines] = None
        self.candidates: Optional[pd.DataFrame] = None
        self.evaluated: Optional[pd.DataFrame] = None
        self.labelled: Optional[pd.DataFrame] = None
        self.discrepancies: Optional[pd.DataFrame] = None

    def gather_data(self, snapshot: Optional[ArchiveSnapshot] = None) -> ArchiveSnapshot:
        """Step 1: Load and validate the archive snapshot.

        Args:
            snapshot: Pre-built snapshot; read from db_path when omitted.
        """
        if snapshot is None:
            reader = ArchiveReader(self.db_path)
            logger.info(f"Database: {reader.db_path}")
            snapshot = ArchiveSnapshot.load(reader, self.config.year, self.config.end_year)
        else:
            snapshot.validate()
        self.snapshot = snapshot
        return self.snapshot

    def resolve_rounds(self) -> pd.DataFrame:
        """Step 2: Round dates from the schedule and round numbers from ranks."""
        if self.snapshot is None:
            raise ValueError("Call gather_data() first")

        self.round_dates = resolve_round_dates(
            self.snapshot.activities,
            self.snapshot.venues,
            self.snapshot.events["id"],
        )
        self.round_numbers = assign_round_numbers(
            self.snapshot.results, self.snapshot.round_types
        )
        return self.round_dates

    def snapshot_baselines(self) -> Baselines:
        """Step 3: Records as of the end of the previous year."""
        if self.snapshot is None:
            raise ValueError("Call gather_data() first")

        self.baselines = compute_baselines(self.snapshot.history, self.snapshot.countries)
        return self.baselines

    def select_candidates(self) -> pd.DataFrame:
        """Step 4: Prune to results that may be records."""
        if self.round_dates is None or self.round_numbers is None:
            raise ValueError("Call resolve_rounds() first")
        if self.baselines is None:
            raise ValueError("Call snapshot_baselines() first")

        self.candidates = filter_candidates(
            self.snapshot.results,
            self.round_numbers,
            self.round_dates,
            self.snapshot.competitions,
            self.baselines.national,
        )
        enforce_candidate_contract(self.candidates)
        return self.candidates

    def evaluate(self) -> pd.DataFrame:
        """Step 5: Record flags and calculated labels."""
        if self.candidates is None:
            raise ValueError("Call select_candidates() first")

        self.evaluated = evaluate_records(
            self.candidates,
            self.snapshot.countries,
            self.baselines,
            n_jobs=self.config.n_jobs,
        )
        self.labelled = resolve_labels(self.evaluated)
        return self.labelled

    def report(self) -> pd.DataFrame:
        """Step 6: Diff calculated against stored labels."""
        if self.labelled is None:
            raise ValueError("Call evaluate() first")

        self.discrepancies = build_discrepancies(self.labelled)
        return self.discrepancies

    @property
    def corrections(self) -> List[Correction]:
        if self.discrepancies is None:
            raise ValueError("Call report() first")
        return collect_corrections(self.discrepancies)

    def save_report(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Step 7: Write the discrepancy report as CSV."""
        if self.discrepancies is None:
            raise ValueError("Call report() first")

        path = Path(path or REPORTS_DIR / f"records_{self.config.year}.csv")
        path.parent.mkdir(parents=True, exist_ok=True)
        self.discrepancies.drop(columns=["corrections"]).to_csv(path, index=False)
        logger.info(f"Report saved to {path}")
        return path

    def save_sql(self, path: Union[str, Path]) -> Path:
        """Write the corrections as an SQL script (one statement per line)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            for fix in self.corrections:
                f.write(fix.to_sql() + "\n")
        logger.info(f"SQL corrections saved to {path}")
        return path

    @classmethod
    def run(
        cls,
        config: Optional[AuditConfig] = None,
        db_path: Optional[str] = None,
        snapshot: Optional[ArchiveSnapshot] = None,
    ) -> "AuditPipeline":
        """Run every stage and return the finished pipeline."""
        pipeline = cls(config=config, db_path=db_path)
        pipeline.gather_data(snapshot)
        pipeline.resolve_rounds()
        pipeline.snapshot_baselines()
        pipeline.select_candidates()
        pipeline.evaluate()
        pipeline.report()
        return pipeline
