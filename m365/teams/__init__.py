"""Microsoft Teams commands."""
