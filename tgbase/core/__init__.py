"""Application wiring package."""
