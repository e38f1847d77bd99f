# src/discuss_board/services/__init__.py
"""Business logic services for the discussion board.

Most services are modules of plain functions taking a ``Session`` first;
moderation keeps its logic on a class of static methods.
"""

from .moderation_service import ModerationService

__all__ = ["ModerationService"]
