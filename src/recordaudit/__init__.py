"""
Record Audit - Record label consistency checks for competition results

Recomputes, for a target year, which results are national, continental or
world records (single and average) and reports every result whose stored
record label disagrees, with the correction needed.

Structure:
    data/      - Read-only archive access, input snapshot, schemas
    pipeline/  - Record computation stages and the AuditPipeline runner
    config.py  - Paths, record labels, run settings

Usage:
    from recordaudit import AuditPipeline
    from recordaudit.config import AuditConfig

    pipeline = AuditPipeline.run(AuditConfig(year=2024))
    print(pipeline.discrepancies)
"""

from recordaudit.pipeline import AuditPipeline

__all__ = ["AuditPipeline", "__version__"]
__version__ = "0.1.0"
