"""CLI subcommand for the preference store."""

from __future__ import annotations

import sys
from typing import Any, TextIO

from envchain.config.line_parser import parse_value
from envchain.config.resolver import format_display
from envchain.errors import EnvChainError
from envchain.services.preferences.interface import PreferenceStoreInterface
from envchain.services.registry import create_implementation
from envchain.services.secrets.env_secrets import EnvSecrets

USAGE = "Usage: python -m envchain pref <get|set|rm|list> [KEY] [VALUE] [--group G] [--prefs IMPL]"


def _parse_prefs_args(argv: list[str]) -> dict[str, Any]:
    """Parse pref subcommand arguments."""
    args: dict[str, Any] = {"command": None, "group": None, "prefs": None, "positionals": []}

    if not argv:
        raise ValueError(USAGE)

    args["command"] = argv[0]
    i = 1
    while i < len(argv):
        flag = argv[i]
        if flag == "--group" and i + 1 < len(argv):
            args["group"] = argv[i + 1]
            i += 2
        elif flag == "--prefs" and i + 1 < len(argv):
            args["prefs"] = argv[i + 1]
            i += 2
        else:
            args["positionals"].append(flag)
            i += 1
    return args


def run_prefs(
    argv: list[str],
    store: PreferenceStoreInterface | None = None,
    out: TextIO | None = None,
) -> int:
    out = out or sys.stdout
    try:
        args = _parse_prefs_args(argv)
        secrets = EnvSecrets()
        if store is None:
            impl = args["prefs"] or secrets.get_or_default("ENVCHAIN_PREFS", "json")
            store = create_implementation("prefs", impl, secrets)
        group = args["group"] or secrets.get_or_default("ENVCHAIN_PREF_GROUP", "env")
        return _dispatch(args["command"], args["positionals"], store, group, out)
    except (ValueError, EnvChainError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _dispatch(
    command: str,
    positionals: list[str],
    store: PreferenceStoreInterface,
    group: str,
    out: TextIO,
) -> int:
    match command, positionals:
        case "get", [key]:
            value = store.get(group, key)
            if value is None:
                return 1
            print(format_display(value), file=out)
            return 0
        case "set", [key, raw]:
            # Same value grammar as a .env line
            text = raw.strip()
            store.set(group, key, parse_value(text) if text else text)
            return 0
        case "rm", [key]:
            return 0 if store.remove(group, key) else 1
        case "list", []:
            for key, value in sorted(store.groups().get(group, {}).items()):
                print(f"{key}={format_display(value)}", file=out)
            return 0
        case "--help" | "-h", _:
            print(USAGE, file=out)
            return 0
        case _:
            raise ValueError(USAGE)
