# dynadiag/checks/__init__.py

from importlib import import_module

from .definitions import (
    CheckDefinition,
    find_check_definition,
    get_check_definition,
    load_all_check_definitions,
    load_check_definition,
    load_suite,
)

# Implementations register themselves with the engine on import. They are
# loaded lazily because they import dynadiag.engine, which imports this package.
_IMPL_MODULES = (
    "impl_store_connection",
    "impl_theme_verified",
    "impl_app_embed",
    "impl_cart_status",
    "impl_widget_status",
    "impl_zone_validator",
    "impl_conflicting_apps",
    "impl_discount_functions",
    "impl_audience_simulation",
    "impl_chain_campaign",
    "impl_chain_experience",
    "impl_chain_audience",
    "impl_chain_zone",
    "impl_chain_theme",
)

_loaded = False


def _ensure_impls_loaded() -> None:
    global _loaded
    if _loaded:
        return
    for name in _IMPL_MODULES:
        import_module(f"{__name__}.{name}")
    _loaded = True


__all__ = [
    "CheckDefinition",
    "find_check_definition",
    "get_check_definition",
    "load_all_check_definitions",
    "load_check_definition",
    "load_suite",
]
