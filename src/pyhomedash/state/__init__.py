"""State/store layer.

This package is the single source of truth for the dashboard view: poll
results and acknowledged control writes are merged here, and nowhere else.
"""
