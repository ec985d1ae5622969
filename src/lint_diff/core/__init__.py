"""Core correlation logic.

This module exports the main components:
- DiffParser: Parses unified diffs into per-file change records
- LineMapper: Maps old line numbers onto the new revision
- FindingParser: Parses raw lint reports into findings
- Correlator: Computes net-new findings between two reports
- Engine: Orchestrates a run across all files of a diff
- CachingEngine: Memoizes engine runs
"""

from lint_diff.core.cache import CachingEngine
from lint_diff.core.correlator import Correlator
from lint_diff.core.diff_parser import DiffParser
from lint_diff.core.engine import Engine
from lint_diff.core.finding_parser import FindingParser
from lint_diff.core.line_mapper import LineMapper

__all__ = [
    "CachingEngine",
    "Correlator",
    "DiffParser",
    "Engine",
    "FindingParser",
    "LineMapper",
]
