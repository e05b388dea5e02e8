from typing import Type

from listing_flow.draft.variants import (
    AuctionVariant,
    ExperienceVariant,
    FreelanceVariant,
    FundraisingVariant,
    GatedContentVariant,
    GoodsVariant,
    LinkVariant,
    RentalVariant,
    ServiceVariant,
    SpaceSharingVariant,
    SubscriptionVariant,
    TransportationVariant,
    VariantBase,
)

# listing_type -> (variant model, legal budget types; the first one is the default)
_VARIANT_REGISTRY: dict[str, tuple[Type[VariantBase], tuple[str, ...]]] = {
    "service": (ServiceVariant, ("range", "fixed", "price_list", "hourly")),
    "goods": (GoodsVariant, ("fixed", "auction")),
    "rental": (RentalVariant, ("fixed",)),
    "experience": (ExperienceVariant, ("fixed",)),
    "subscription": (SubscriptionVariant, ("fixed",)),
    "freelance": (FreelanceVariant, ("fixed", "per_project", "per_hour")),
    "auction": (AuctionVariant, ("auction",)),
    "space_sharing": (SpaceSharingVariant, ("fixed",)),
    "fundraising": (FundraisingVariant, ("fixed",)),
    "transportation": (TransportationVariant, ("fixed",)),
    "link": (LinkVariant, ("fixed",)),
    "gated_content": (GatedContentVariant, ("fixed",)),
}


def resolve_variant(listing_type: str) -> Type[VariantBase]:
    if listing_type not in _VARIANT_REGISTRY:
        raise KeyError(f"Unknown listing type: {listing_type}")
    return _VARIANT_REGISTRY[listing_type][0]


def legal_budget_types(listing_type: str) -> tuple[str, ...]:
    return _VARIANT_REGISTRY[listing_type][1]


def default_budget_type(listing_type: str) -> str:
    return _VARIANT_REGISTRY[listing_type][1][0]


def is_budget_type_legal(listing_type: str, budget_type: str) -> bool:
    return listing_type in _VARIANT_REGISTRY and budget_type in _VARIANT_REGISTRY[listing_type][1]


def variant_columns() -> set[str]:
    """
    Every variant column of the listings table. Submission writes the active
    variant's values and null for the rest.
    """
    cols: set[str] = set()
    for model, _ in _VARIANT_REGISTRY.values():
        cols.update(name for name in model.model_fields if name != "kind")
    return cols
