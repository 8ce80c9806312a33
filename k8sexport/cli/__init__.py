"""k8s-export CLI — Typer-based command-line interface.

Provides the ``k8s-export`` command.  Diagnostics for unknown resource
types go to stdout; logs, the run summary and fatal errors go to stderr.
"""
