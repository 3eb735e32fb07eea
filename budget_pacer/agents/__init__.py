"""Per-account pacing workflow."""

from budget_pacer.agents.pacing_workflow import PacingWorkflow, PacingState

__all__ = [
    "PacingWorkflow",
    "PacingState",
]
