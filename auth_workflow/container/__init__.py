"""
Dependency injection container for managing service dependencies.
"""

from .container import Container, get_container, initialize_container, cleanup_container

__all__ = [
    "Container",
    "get_container",
    "initialize_container",
    "cleanup_container"
]
