"""Sync of jj changes with GitHub pull requests.

This module provides:
- PrSyncEngine: push the working change and create/update its PR
- ReviewerResolver: candidate/desired reviewer sets and reconciliation
- RefinementLoop: conversational description refinement
- DescriptionWorkflow: the `ai-desc` pipeline
"""

from .describe import DescribeOptions, DescribeResult, DescriptionWorkflow
from .engine import PrSyncEngine
from .enums import OutputFormat, RefinementState
from .refinement import RefinementLoop, build_instructions
from .results import RefinementOutcome, ReviewerPlan, SyncResult
from .reviewers import MAX_REVIEWERS, ReviewerResolver
from .sets import difference, union

__all__ = [
    # Engine
    "PrSyncEngine",
    "SyncResult",
    # Reviewers
    "MAX_REVIEWERS",
    "ReviewerPlan",
    "ReviewerResolver",
    "difference",
    "union",
    # Refinement
    "RefinementLoop",
    "RefinementOutcome",
    "RefinementState",
    "build_instructions",
    # Describe workflow
    "DescribeOptions",
    "DescribeResult",
    "DescriptionWorkflow",
    # Enums
    "OutputFormat",
]
