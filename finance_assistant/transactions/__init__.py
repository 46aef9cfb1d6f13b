"""Persisted transactions created by the import endpoints."""

from .models import Transaction

__all__ = ["Transaction"]
