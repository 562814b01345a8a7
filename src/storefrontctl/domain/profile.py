"""StoreProfile — the read-only store record owned by the marketplace.

Parsed from ``GET /api/stores/{storeId}/comprehensive``. Only the fields
the data enricher projects are modelled; everything else is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProfileModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )


class StoreAddress(ProfileModel):
    address_type: str | None = None
    location_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    is_primary: bool = False


class OpenHours(ProfileModel):
    day_of_week: int = Field(ge=0, le=6)
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False


class PaymentMethodName(ProfileModel):
    method_name: str


class StorePaymentMethod(ProfileModel):
    method_id: int | None = None
    payment_method: PaymentMethodName


class StoreCategory(ProfileModel):
    category_id: int
    name: str
    description: str | None = None
    icon_url: str | None = None


class StoreProfile(ProfileModel):
    """Authoritative store data used to enrich module settings."""

    store_id: int
    store_name: str
    contact_phone: str | None = None
    contact_email: str | None = None
    delivery_radius_mi: float | None = None
    slug: str | None = None
    addresses: list[StoreAddress] = Field(default_factory=list)
    open_hours: list[OpenHours] = Field(default_factory=list)
    payment_methods: list[StorePaymentMethod] = Field(default_factory=list)
    categories: list[StoreCategory] = Field(default_factory=list)
