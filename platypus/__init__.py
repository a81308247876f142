"""A side-scrolling mining and combat game with procedural terrain."""

__version__ = "0.1.0"