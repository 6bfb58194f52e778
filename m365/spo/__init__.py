"""SharePoint Online commands."""
