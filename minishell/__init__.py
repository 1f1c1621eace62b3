"""Execution engine for a small POSIX-style shell: builtins, redirections, PATH lookup and pipelines."""

__version__ = "0.1.0"