"""uploadsweep - find and remove orphaned media files.

Reconciles an uploads directory against a registry of known
attachments and deletes unregistered files in bounded batches.
"""

__version__ = "0.1.0"
