"""Command-line client for Microsoft 365 (SharePoint Online, Teams, Power Automate)."""

__version__ = "0.1.0"
