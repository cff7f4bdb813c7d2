"""Core plumbing: settings, logging and the exception hierarchy."""
