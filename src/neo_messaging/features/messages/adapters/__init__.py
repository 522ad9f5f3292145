"""External storage adapters."""
from .cloudinary_storage import CloudinaryStorage

__all__ = ["CloudinaryStorage"]
