"""Checklist templates and their application to events."""
