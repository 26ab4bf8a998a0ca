"""In-memory todo list API with JSON, bare-router and htmx front ends."""

__version__ = "0.1.0"
