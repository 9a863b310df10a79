"""
Record Audit Pipeline Module

Stages, in dependency order:
    Stage 1: round_dates.py    - scheduled round -> local date
    Stage 2: round_numbers.py  - round type -> round number
    Stage 3: baselines.py      - pre-year NR / CR / WR values
    Stage 4: candidates.py     - results that may be records
    Stage 5: national.py       - NR flags
    Stage 6: regional.py       - CR / WR flags
    Stage 7: labels.py         - WR > CR > NR precedence
    Stage 8: discrepancies.py  - stored vs calculated labels

Runner:
    AuditPipeline - Step-by-step or full-run orchestration
"""

from recordaudit.pipeline.runner import AuditPipeline, evaluate_records

__all__ = [
    "AuditPipeline",
    "evaluate_records",
]
