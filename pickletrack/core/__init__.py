"""Core module for the pickletrack application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
