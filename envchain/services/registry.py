"""Central registry mapping (interface_name, impl_name) to concrete class paths.

Uses string paths for lazy imports: importing the registry doesn't import an
implementation until it is selected.
"""

import importlib
from typing import Any

REGISTRY: dict[str, dict[str, str]] = {
    "prefs": {
        "memory": "envchain.services.preferences.memory_preferences.MemoryPreferences",
        "json": "envchain.services.preferences.json_preferences.JsonPreferences",
    },
}


def resolve_class(dotted_path: str) -> type[Any]:
    """Import and return a class from a dotted module.ClassName path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def resolve_implementation(flag_name: str, impl_name: str) -> type[Any]:
    """Look up the concrete class for a given flag and implementation name."""
    impls = REGISTRY.get(flag_name)
    if impls is None:
        raise ValueError(f"Unknown interface flag: --{flag_name}")
    dotted = impls.get(impl_name)
    if dotted is None:
        available = ", ".join(impls.keys())
        raise ValueError(
            f"Unknown implementation '{impl_name}' for --{flag_name} "
            f"(available: {available})"
        )
    return resolve_class(dotted)


def create_implementation(flag_name: str, impl_name: str, secrets: Any) -> Any:
    """Instantiate an implementation, passing *secrets* to those that read settings."""
    cls = resolve_implementation(flag_name, impl_name)
    from_secrets = getattr(cls, "from_secrets", None)
    if from_secrets is not None:
        return from_secrets(secrets)
    return cls()
