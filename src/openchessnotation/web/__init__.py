"""HTTP API for notation recovery."""

from openchessnotation.web.app import create_app

__all__ = [
    "create_app",
]
