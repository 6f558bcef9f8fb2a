"""CLI command handlers."""

from .apply import apply_pipeline

__all__ = ['apply_pipeline']
