"""Shared infrastructure: settings, logging, errors, cache, rate limiting, types."""
