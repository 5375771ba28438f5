"""
Centralized enum definitions.

Usage:
    from drivenote.enums import LogOutcome, ChecklistMode, RouteStatus
"""

from drivenote.enums.activity import ChecklistMode, LogOutcome, RouteStatus

__all__ = [
    "ChecklistMode",
    "LogOutcome",
    "RouteStatus",
]
