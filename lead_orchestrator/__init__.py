"""Salesforce Lead create-then-read workflow."""

from .engine import LeadWorkflow, WorkflowResult
from .persist import persist

__all__ = ["LeadWorkflow", "WorkflowResult", "persist"]
