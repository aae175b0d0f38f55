"""Time, locking, event bus and HTTP response helpers."""
