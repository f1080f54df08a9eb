"""Services module for loading parser inputs."""

from trailparse.services.context_loader import load_context_from_file

__all__ = [
    "load_context_from_file",
]
