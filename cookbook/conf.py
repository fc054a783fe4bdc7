"""
Cookbook Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    COOKBOOK = {
        "SEARCH_BACKEND": "cookbook.adapters.postgres.PostgresTextSearch",
        "DEFAULT_LIMIT": 100,
    }

    # Option 2: Flat
    COOKBOOK_SEARCH_BACKEND = "cookbook.adapters.postgres.PostgresTextSearch"
    COOKBOOK_DEFAULT_LIMIT = 100

All settings have defaults; no configuration is required.
"""

import threading

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    # Explicit text-search strategy; None = pick by database vendor
    "SEARCH_BACKEND": None,
    "SEARCH_BACKENDS": {
        "mysql": "cookbook.adapters.mysql.MySQLTextSearch",
        "postgresql": "cookbook.adapters.postgres.PostgresTextSearch",
        "sqlite": "cookbook.adapters.contains.ContainsTextSearch",
    },
    "FALLBACK_SEARCH_BACKEND": "cookbook.adapters.contains.ContainsTextSearch",
    # Applied when a request has no _limit; None = unlimited
    "DEFAULT_LIMIT": None,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a cookbook setting.

    Looks up in order:
    1. COOKBOOK dict (e.g. COOKBOOK = {"DEFAULT_LIMIT": 100})
    2. Flat setting (e.g. COOKBOOK_DEFAULT_LIMIT = 100)
    3. DEFAULTS
    """
    cookbook_dict = getattr(settings, "COOKBOOK", {})
    if name in cookbook_dict:
        return cookbook_dict[name]

    flat_value = getattr(settings, f"COOKBOOK_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_search_backend_path(vendor: str) -> str:
    """
    Return the dotted path of the text-search strategy for a vendor.

    An explicit SEARCH_BACKEND wins over the per-vendor table.
    """
    explicit = get_setting("SEARCH_BACKEND")
    if explicit:
        return explicit

    backends = get_setting("SEARCH_BACKENDS") or {}
    return backends.get(vendor) or get_setting("FALLBACK_SEARCH_BACKEND")


_search_backend_lock = threading.Lock()
_search_backend_instances = {}


def get_search_backend(vendor: str):
    """
    Return the text-search strategy instance for a database vendor.

    Instances are created once per dotted path and reused.
    """
    path = get_search_backend_path(vendor)

    if path not in _search_backend_instances:
        with _search_backend_lock:
            if path not in _search_backend_instances:  # double-checked
                from django.utils.module_loading import import_string

                _search_backend_instances[path] = import_string(path)()

    return _search_backend_instances[path]


def reset_search_backends() -> None:
    """Reset cached strategies (for tests)."""
    _search_backend_instances.clear()
