"""SMS notifications and remote event log."""
