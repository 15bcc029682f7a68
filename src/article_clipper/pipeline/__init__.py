"""End-to-end clip pipeline."""

from .orchestrator import ClipOrchestrator, run_clip

__all__ = ["ClipOrchestrator", "run_clip"]
