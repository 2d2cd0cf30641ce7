"""Core run logic for profsweep."""
