"""Shared helpers used across the standup packages."""
