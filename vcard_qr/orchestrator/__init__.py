"""Workflow orchestration for coordinating parsing, rendering, and export."""

from .service import ContactPipeline

__all__ = ["ContactPipeline"]
