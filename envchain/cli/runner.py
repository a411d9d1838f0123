"""``python -m envchain KEY [DEFAULT]``: display a resolved value.

This is the fire-and-forget mode: an undefined key without a default prints
nothing and still exits 0. ``*`` lists the nearest .env file with every
reference expanded.
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, TextIO

from envchain.config.api import build_resolver
from envchain.config.context import ResolverConfig
from envchain.config.env_cache import CachePolicy
from envchain.config.resolver import MISSING, EnvResolver
from envchain.errors import EnvChainError
from envchain.services.secrets.env_secrets import EnvSecrets

USAGE = "Usage: python -m envchain [flags] KEY [DEFAULT]"

# Flags that take a value -> ResolverConfig field (None = handled separately)
_VALUE_FLAGS: dict[str, str | None] = {
    "log": "log_impl",
    "prefs": "prefs_impl",
    "group": "pref_group",
    "cache": "cache_policy",
    "env-file": "env_file",
    "filename": "filename",
    "start-dir": None,
    "env": None,
}


def parse_args(argv: list[str]) -> dict[str, Any]:
    """Split argv into flag values and positionals."""
    args: dict[str, Any] = {
        "flags": {},
        "env_overrides": {},
        "start_dir": None,
        "interpolate": True,
        "positionals": [],
    }
    i = 0
    while i < len(argv):
        arg = argv[i]
        name = arg[2:] if arg.startswith("--") else None
        if name in _VALUE_FLAGS:
            if i + 1 >= len(argv):
                raise ValueError(f"Flag --{name} requires a value")
            value = argv[i + 1]
            if name == "env":
                args["env_overrides"].update(_parse_env_overrides(value))
            elif name == "start-dir":
                args["start_dir"] = Path(value)
            else:
                args["flags"][name] = value
            i += 2
        elif arg == "--no-interpolate":
            args["interpolate"] = False
            i += 1
        elif arg.startswith("--") and arg != "--help":
            raise ValueError(f"Unknown flag: {arg}")
        else:
            args["positionals"].append(arg)
            i += 1

    if not args["positionals"] or len(args["positionals"]) > 2:
        raise ValueError(USAGE)
    return args


def _parse_env_overrides(raw: str) -> dict[str, str]:
    """Parse a JSON string into env overrides. Validates types."""
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("--env value must be a JSON object")
    for k, v in data.items():
        if not isinstance(k, str) or not isinstance(v, str):
            raise ValueError("--env JSON must have string keys and string values")
    return data


def build_from_args(args: dict[str, Any]) -> EnvResolver:
    secrets = EnvSecrets(overrides=args["env_overrides"])
    base = ResolverConfig.from_secrets(secrets)
    fields: dict[str, Any] = {}
    for name, value in args["flags"].items():
        field = _VALUE_FLAGS[name]
        if field == "cache_policy":
            value = CachePolicy.from_name(value)
        elif field == "env_file":
            value = Path(value).expanduser()
        fields[field] = value
    config = replace(base, **fields)

    resolver = build_resolver(secrets=secrets, config=config)
    if args["start_dir"] is not None:
        resolver.start_dir = args["start_dir"]
    return resolver


def print_help(out: TextIO) -> None:
    print(f"\n  {USAGE}", file=out)
    print("  Resolve KEY from the environment, the nearest .env file, then preferences.\n", file=out)
    print("  Flags:", file=out)
    print(f"    --{'log':20s} Logging: pretty, memory, loki [default: pretty]", file=out)
    print(f"    --{'prefs':20s} Preference store: json, memory [default: json]", file=out)
    print(f"    --{'group':20s} Preference group [default: env]", file=out)
    print(f"    --{'cache':20s} Cache policy: once, mtime [default: once]", file=out)
    print(f"    --{'env-file':20s} Read this file instead of searching for one", file=out)
    print(f"    --{'filename':20s} Name of the file to search for [default: .env]", file=out)
    print(f"    --{'start-dir':20s} Directory to start the search from [default: cwd]", file=out)
    print(f"    --{'env':20s} JSON string of env var overrides", file=out)
    print(f"    --{'no-interpolate':20s} Print values without expanding $NAME references", file=out)
    print("\n  Subcommands:", file=out)
    print(f"    {'pref get|set|rm':22s} Manage stored preferences (see: pref --help)\n", file=out)


def run(argv: list[str], out: TextIO | None = None) -> int:
    """Testable entry point: returns the exit code."""
    out = out or sys.stdout
    if "--help" in argv or "-h" in argv:
        print_help(out)
        return 0

    args = parse_args(argv)
    resolver = build_from_args(args)
    key = args["positionals"][0]
    default = args["positionals"][1] if len(args["positionals"]) > 1 else MISSING
    resolver.show(key, default, interpolate=args["interpolate"], stream=out)
    return 0


def run_cli(argv: list[str] | None = None) -> None:
    args = argv if argv is not None else sys.argv[1:]
    try:
        sys.exit(run(args))
    except (ValueError, EnvChainError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
