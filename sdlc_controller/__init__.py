"""SDLC Controller - Issue dependency scheduling for generated work items."""

__version__ = "0.1.0"
