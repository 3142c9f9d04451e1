"""In-memory vehicle roster editor: document model, history and derived views."""

__all__ = [
    "adapters",
    "config",
    "derive",
    "document",
    "events",
    "files",
    "runtime",
    "session",
    "sync",
]

__version__ = "0.1.0"
