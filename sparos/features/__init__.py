"""Feature slices built on top of the core infrastructure."""
