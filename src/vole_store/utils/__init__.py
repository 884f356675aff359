"""Small helpers shared across the store."""
