"""API infrastructure shared by the service's routers."""
from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers

__all__ = ["ExceptionHandlerRegistry", "register_exception_handlers"]
