"""Service module exports."""

from . import aggregation, reports, tracker

__all__ = ["aggregation", "reports", "tracker"]
