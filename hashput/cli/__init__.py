"""hashput CLI — Typer-based command-line interface.

Provides the ``hashput`` command with ``upload`` and ``digest``
subcommands.  All human-readable output uses Rich.
"""
