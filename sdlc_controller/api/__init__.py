"""API module - HTTP surface for the issue scheduler."""
