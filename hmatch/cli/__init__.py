"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands. Keep this file minimal to avoid circular
imports and duplication.
"""
from hmatch.cli.helpers import cli  # root group
from hmatch.cli import match_cmds  # noqa: F401
from hmatch.cli import score_cmds  # noqa: F401
from hmatch.cli import config_cmds  # noqa: F401

__all__ = ["cli"]
