"""Schemas for files the CLI reads."""

from trailparse.schemas.context_snapshot import ContextSnapshot

__all__ = [
    "ContextSnapshot",
]
