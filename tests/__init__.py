"""
Test suite for confapp.

Tests are organized to mirror the package:

- core/config/: Field registry, validators, formats, persistence and value store
- core/utils/: Logging helpers
- cli/: Typer commands, exercised through typer.testing.CliRunner
"""
