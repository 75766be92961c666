"""Utility modules for uploadsweep."""
