"""Shared database model helpers."""

from .base import BaseModel

__all__ = ["BaseModel"]
