"""Domain apps of the slot booking service."""
