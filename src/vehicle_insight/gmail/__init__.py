"""Gmail API access, search, fetch and message parsing."""
