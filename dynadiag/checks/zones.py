from __future__ import annotations

from typing import Iterable, List, Mapping

from ..models import Context, StoreHealth


def zone_registered(store: StoreHealth, zone_id: str) -> bool:
    return zone_id in store.theme_zones


def colliding_apps(
    store: StoreHealth,
    zone_id: str,
    known_app_zones: Mapping[str, Iterable[str]],
) -> List[str]:
    """Installed conflicting apps known to inject into zone_id, sorted by name."""
    return sorted(
        app for app in store.conflicting_apps
        if zone_id in set(known_app_zones.get(app, ()))
    )


def register_widget_zone(context: Context) -> Context:
    """Context in which the widget's zone has been added to the theme."""
    if context.widget is None:
        return context
    zones = context.store.theme_zones | {context.widget.zone_id}
    return context.with_store(theme_zones=frozenset(zones))
