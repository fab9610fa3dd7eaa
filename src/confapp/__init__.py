"""
confapp - Structured configuration management for command-line applications

A small application that keeps every configuration parameter in one typed
field registry and resolves values from layered sources.

Key Features:
- Typed field descriptors with defaults, validation rules and documentation
- Layered resolution: explicit values > environment variables > config file > defaults
- Config files in YAML, JSON, TOML, HCL or dotenv format, chosen by extension
- A ``config`` command group to list, describe and set fields

Package Structure:
- core/config/: Field registry, validators, value store and file formats
- core/utils/: Logging and path helpers
- cli/: Typer command-line interface
"""

__version__ = "0.1.0"
