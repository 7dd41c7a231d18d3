"""Domain modules of the settlement server."""
