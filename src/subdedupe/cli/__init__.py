"""Command-line interface for subdedupe."""
