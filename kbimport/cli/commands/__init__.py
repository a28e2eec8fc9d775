"""CLI command handlers for kbimport."""

from kbimport.cli.commands.import_cmd import ExitCode, cmd_import, cmd_rollback

__all__ = ["ExitCode", "cmd_import", "cmd_rollback"]
