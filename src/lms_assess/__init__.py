"""
Course assessment core.

Pure functions for access checks, answer evaluation, submission grading,
course progress and leaderboards, plus a SQLite result store and a thin
facade that composes them.
"""

from .config.loader import load_settings

__all__ = ["load_settings"]
