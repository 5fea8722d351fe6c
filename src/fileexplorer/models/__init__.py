"""SQLModel database models for the file explorer."""

from fileexplorer.models.shares import SharedPath, SharedPathBase

__all__ = [
    "SharedPath",
    "SharedPathBase",
]
