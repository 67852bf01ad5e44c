"""Route planning: stop extraction, ordering and metrics."""
