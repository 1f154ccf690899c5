"""Utility modules for the reminder worker."""
