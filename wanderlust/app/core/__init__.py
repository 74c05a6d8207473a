"""Core infrastructure: settings, logging, database, security and sessions."""
