"""DataEnricher — projects the StoreProfile into reserved settings keys.

Enrichment replaces the reserved sub-objects wholesale and never touches a
user-editable key, so re-running it cannot undo a hand edit. Each load
bumps a generation counter; a completion tagged with an older generation,
or one already applied, is discarded.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from storefrontctl.domain.modules import BaseModule
from storefrontctl.domain.profile import StoreAddress, StoreProfile
from storefrontctl.domain.settings import (
    AddressSummary,
    BusinessAddress,
    BusinessAddressSettings,
    BusinessHours,
    CategorySummary,
    ContactFormSettings,
    ContactInfo,
    LogisticsInfo,
    PolicySectionSettings,
    ProductCategoriesSettings,
    StoreContactInfo,
)

log = structlog.get_logger(__name__)

CLOSED_DAY_OPEN = "09:00"
CLOSED_DAY_CLOSE = "17:00"


# ---------------------------------------------------------------------------
# Pure projections
# ---------------------------------------------------------------------------


def store_contact_info(profile: StoreProfile) -> StoreContactInfo:
    address = next(
        (a for a in profile.addresses if a.address_type == "business_address" or a.is_primary),
        None,
    )
    summary = None
    if address is not None:
        summary = AddressSummary(
            location_name=address.location_name,
            street_address=address.street_address,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
        )
    return StoreContactInfo(
        store_phone=profile.contact_phone,
        store_email=profile.contact_email,
        business_address=summary,
    )


def weekly_hours(profile: StoreProfile) -> list[BusinessHours]:
    """All seven days; days missing from the profile are closed."""
    by_day = {h.day_of_week: h for h in profile.open_hours}
    hours: list[BusinessHours] = []
    for day in range(7):
        known = by_day.get(day)
        if known is None:
            hours.append(
                BusinessHours(
                    day_of_week=day,
                    open_time=CLOSED_DAY_OPEN,
                    close_time=CLOSED_DAY_CLOSE,
                    is_closed=True,
                )
            )
        else:
            hours.append(
                BusinessHours(
                    day_of_week=day,
                    open_time=known.open_time,
                    close_time=known.close_time,
                    is_closed=known.is_closed,
                )
            )
    return hours


def logistics_info(profile: StoreProfile) -> LogisticsInfo:
    radius = profile.delivery_radius_mi
    return LogisticsInfo(
        has_delivery=bool(radius and radius > 0),
        delivery_radius=radius,
        has_farm_pickup=any(a.address_type == "farm_location" for a in profile.addresses),
        has_business_address=any(
            a.address_type in ("business", "business_address") for a in profile.addresses
        ),
    )


def primary_address(addresses: list[StoreAddress]) -> StoreAddress | None:
    """Pick the display address: business, then pickup, then primary, then first."""
    if not addresses:
        return None
    for candidate in (
        next((a for a in addresses if a.address_type == "business"), None),
        next((a for a in addresses if a.address_type == "pickup"), None),
        next((a for a in addresses if a.is_primary), None),
    ):
        if candidate is not None:
            return candidate
    return addresses[0]


def business_address(profile: StoreProfile) -> BusinessAddress | None:
    address = primary_address(profile.addresses)
    if address is None:
        return None
    return BusinessAddress(
        address_type=address.address_type,
        location_name=address.location_name,
        contact_phone=address.contact_phone,
        contact_email=profile.contact_email or address.contact_email,
        street_address=address.street_address,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
    )


def enrich_module(module: BaseModule, profile: StoreProfile) -> bool:
    """Replace the reserved keys of one module. Returns True if it is enrichable."""
    match module.settings:
        case ContactFormSettings():
            module.settings = module.settings.model_copy(
                update={"store_contact_info": store_contact_info(profile)}
            )
        case PolicySectionSettings():
            module.settings = module.settings.model_copy(
                update={
                    "business_hours": weekly_hours(profile),
                    "payment_methods": [
                        pm.payment_method.method_name for pm in profile.payment_methods
                    ],
                    "contact_info": ContactInfo(
                        phone=profile.contact_phone,
                        email=profile.contact_email,
                        store_name=profile.store_name,
                    ),
                    "logistics_info": logistics_info(profile),
                }
            )
        case ProductCategoriesSettings():
            module.settings = module.settings.model_copy(
                update={
                    "categories": [
                        CategorySummary(
                            category_id=c.category_id,
                            name=c.name,
                            description=c.description,
                            icon_url=c.icon_url,
                        )
                        for c in profile.categories
                    ]
                }
            )
        case BusinessAddressSettings():
            address = business_address(profile)
            if address is None:
                return False
            module.settings = module.settings.model_copy(update={"business_address": address})
        case _:
            return False
    return True


# ---------------------------------------------------------------------------
# Generation-tagged enricher
# ---------------------------------------------------------------------------


class DataEnricher:
    """Applies a profile at most once per load generation."""

    def __init__(self, generation: int = 0) -> None:
        self._generation = generation
        self._applied_generation: int | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def begin_load(self) -> int:
        """Start a new load and return its generation tag."""
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation and generation != self._applied_generation

    def enrich(
        self,
        modules: Iterable[BaseModule],
        profile: StoreProfile | None,
        *,
        generation: int,
    ) -> list[str]:
        """Project *profile* into *modules*.

        Returns:
            Ids of the modules that were enriched. Empty when the profile is
            unavailable or the generation is stale or already applied.
        """
        if profile is None:
            log.info("enrichment.skipped", reason="profile_unavailable", generation=generation)
            return []
        if generation != self._generation:
            log.info(
                "enrichment.discarded",
                reason="stale",
                generation=generation,
                current=self._generation,
            )
            return []
        if generation == self._applied_generation:
            log.debug("enrichment.discarded", reason="already_applied", generation=generation)
            return []

        enriched = [m.id for m in modules if enrich_module(m, profile)]
        self._applied_generation = generation
        log.debug("enrichment.applied", generation=generation, modules=len(enriched))
        return enriched
