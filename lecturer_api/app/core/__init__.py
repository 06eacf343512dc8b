"""Core infrastructure: settings, logging, storage and security."""
