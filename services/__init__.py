"""Task, event and week-layout services."""
