"""Command-line interface for harpver."""
