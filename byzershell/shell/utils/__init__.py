"""Utility modules for the Byzer shell."""

from .shared_io import SharedIO

__all__ = ["SharedIO"]
