"""Pydantic schemas for API requests and responses."""

from .common import Page, PageRequest, Pagination

__all__ = ["Page", "PageRequest", "Pagination"]
