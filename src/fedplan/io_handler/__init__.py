from .io_handler_base import AbstractIOHandler
from .local_io_handler import LocalIOHandler

__all__ = ["AbstractIOHandler", "LocalIOHandler"]
