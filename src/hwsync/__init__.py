"""hwsync - keeps NetBox device records in line with compute cluster hardware."""

__version__ = "0.1.0"
