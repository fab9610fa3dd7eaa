"""Shared utilities for confapp."""
