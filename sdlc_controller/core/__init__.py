"""Core module - Configuration for the SDLC Controller."""
