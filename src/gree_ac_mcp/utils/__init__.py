"""Low-level helpers."""
