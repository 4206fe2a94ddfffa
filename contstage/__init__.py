"""Composable, resumable stages that yield values and are driven by a responder."""

__version__ = "0.2.0"
__all__ = ["cont", "first", "handler"]