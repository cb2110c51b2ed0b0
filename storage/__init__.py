"""Database and user configuration storage."""
