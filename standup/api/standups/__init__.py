"""Standup submission, schedule and trigger resources."""
