"""Core infrastructure: errors, logging, record storage."""
