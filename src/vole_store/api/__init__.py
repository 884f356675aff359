"""HTTP layer consuming the store."""
