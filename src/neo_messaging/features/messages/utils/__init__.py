"""Message feature utilities."""
from .validation import MessageValidationRules

__all__ = ["MessageValidationRules"]
