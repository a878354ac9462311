from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorePlan(str, Enum):
    BASIC = "Basic"
    SHOPIFY = "Shopify"
    ADVANCED = "Advanced"
    PLUS = "Plus"


class Device(str, Enum):
    DESKTOP = "Desktop"
    MOBILE = "Mobile"


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"


class MigrationStatus(str, Enum):
    PENDING = "pending"
    STAGING = "staging"
    LIVE = "live"


class DiscountOutcome(str, Enum):
    APPLIED = "Applied"
    REJECTED = "Rejected"
    ERROR = "Error"


def _split_tags(value: Any) -> Any:
    # Tags typed into the simulator arrive as "VIP, Wholesale"
    if isinstance(value, str):
        return frozenset(t.strip() for t in value.split(",") if t.strip())
    return value


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class CartProfile(Record):
    name: str
    type: Literal["Dynamic", "Static"] = "Dynamic"
    is_active: bool = True
    last_updated: Optional[str] = None


class DiscountLog(Record):
    """One simulated run of a discount function."""
    id: str
    function_name: str
    input: str = ""
    result: DiscountOutcome
    details: str = ""
    timestamp: Optional[str] = None


class StoreHealth(Record):
    cart_enabled: bool = True
    app_embed_enabled: bool = True
    theme_name: str = ""
    theme_integration_verified: bool = False
    conflicting_apps: FrozenSet[str] = frozenset()
    plan: StorePlan = StorePlan.BASIC
    api_connected: bool = True
    theme_zones: FrozenSet[str] = frozenset()
    cart_profile: Optional[CartProfile] = None
    discount_logs: Tuple[DiscountLog, ...] = ()


class ExperienceRule(Record):
    name: str
    condition: str


class AudienceRule(Record):
    """
    Visibility rule attached to a widget.

    required_tags gate the Audience stage of the dependency chain,
    excluded_tags and devices drive the audience simulator.
    """
    name: str = "Global"
    required_tags: FrozenSet[str] = frozenset()
    excluded_tags: FrozenSet[str] = frozenset()
    devices: Optional[FrozenSet[Device]] = None

    @field_validator("required_tags", "excluded_tags", mode="before")
    @classmethod
    def split_tags(cls, value: Any) -> Any:
        return _split_tags(value)


class Widget(Record):
    id: str
    name: str = ""
    type: str = ""
    zone_id: str
    is_active: bool = True
    campaign_id: Optional[str] = None
    experience_id: Optional[str] = None
    experience: Optional[ExperienceRule] = None
    audience: Optional[AudienceRule] = None
    # Opaque, edited out-of-band; never schema-validated here.
    config: Dict[str, Any] = Field(default_factory=dict)


class ShopperContext(Record):
    cart_total: Decimal = Decimal("0")
    tags: FrozenSet[str] = frozenset()
    device: Device = Device.DESKTOP

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Any) -> Any:
        return _split_tags(value)


class Campaign(Record):
    id: str
    name: str = ""
    status: CampaignStatus


class MigrationTask(Record):
    id: str
    source_widget: str
    target_widget: str
    status: MigrationStatus = MigrationStatus.PENDING


class Context(Record):
    """
    Read-only snapshot of everything a check may read.

    Changes go through evolve(), which returns a new Context.
    """
    store: StoreHealth
    widget: Optional[Widget] = None
    shopper: Optional[ShopperContext] = None
    campaign: Optional[Campaign] = None

    def evolve(self, **changes: Any) -> "Context":
        return self.model_copy(update=changes)

    def with_widget(self, widget: Optional[Widget]) -> "Context":
        return self.evolve(widget=widget)

    def with_store(self, **changes: Any) -> "Context":
        store = StoreHealth.model_validate({**self.store.model_dump(), **changes})
        return self.evolve(store=store)
