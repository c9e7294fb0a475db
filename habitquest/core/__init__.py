"""Core infrastructure: configuration, errors, logging, time and recurrence helpers."""
