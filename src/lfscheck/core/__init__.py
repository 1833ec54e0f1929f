# src/lfscheck/core/__init__.py
"""Core infrastructure: configuration and logging."""
