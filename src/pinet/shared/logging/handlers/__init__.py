from .stream import LogStreamHandler, LogStreamFormatter

__all__ = [
    "LogStreamHandler",
    "LogStreamFormatter",
]
