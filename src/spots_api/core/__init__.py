"""Core infrastructure: configuration, logging, database, background tasks, and dependencies."""
