"""Form and input helpers."""
