"""Session store implementations for times_drill."""
