"""
Core modules for confapp.

- config: Field registry, validation, value resolution and persistence
- utils: Logging and filesystem path helpers
"""
