"""Guardian risk scoring and fusion core."""
