"""Configuration, logging, security and dependency wiring."""
