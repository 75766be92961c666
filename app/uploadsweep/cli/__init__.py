"""Command-line interface for uploadsweep."""
