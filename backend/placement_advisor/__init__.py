"""Placement Advisor - chat with a placement advisor after signing in."""
