"""Power Automate (Flow) commands."""
