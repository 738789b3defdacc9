"""Regular graphs of large girth found as lifts of voltage graphs over finite groups."""

__version__ = "0.1.0"