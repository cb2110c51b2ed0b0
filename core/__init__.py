"""Priority scoring, week grid geometry and application settings."""
