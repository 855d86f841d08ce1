"""Command-line tools for pulse scoring."""
