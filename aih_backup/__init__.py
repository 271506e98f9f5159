"""
AIH Backup - snapshots of an OpenClaw assistant's local state.

Backups capture the workspace layout, the memory files and the assistant
config as JSON documents in a SQL table, and can be restored back onto
disk from the CLI, the HTTP API or the web dashboard.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
