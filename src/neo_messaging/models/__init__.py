"""Shared API models."""
from .base import APIResponse, BaseSchema, error_response

__all__ = ["APIResponse", "BaseSchema", "error_response"]
