"""Infrastructure adapters: database, cache and chain access."""
