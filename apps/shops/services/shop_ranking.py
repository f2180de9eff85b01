"""Shop sections for the homepage, built on the stored promo fields."""

from django.db.models import Q, QuerySet
from typing import Optional

from ..models import Shop

WALLET_AND_BANK_TOKENS = ('ewallet', 'bank')
FOOD_TOKENS = ('food',)


def _base_queryset() -> QuerySet[Shop]:
    return Shop.objects.prefetch_related('menu_items', 'vouchers')


def get_top_discount_shops(*, limit: Optional[int] = None) -> QuerySet[Shop]:
    """
    Get shops with any promo, biggest saving first.

    Ties on saving are ordered by name.

    Args:
        limit: Maximum number of shops to return

    Returns:
        QuerySet of shops with max_effective_discount_value > 0
    """
    queryset = (
        _base_queryset()
        .filter(max_effective_discount_value__gt=0)
        .order_by('-max_effective_discount_value', 'name')
    )
    if limit is not None:
        queryset = queryset[:limit]
    return queryset


def get_shops_with_tag(*tokens: str) -> QuerySet[Shop]:
    """
    Get shops whose aggregated tags contain any of the tokens.

    Matching is a substring match on the stored tag string, so ``bank``
    also matches a tag such as ``bank abc``.
    """
    if not tokens:
        return Shop.objects.none()

    condition = Q()
    for token in tokens:
        condition |= Q(aggregated_promo_tags__contains=token.lower())
    return _base_queryset().filter(condition).order_by('name')


def get_wallet_and_bank_shops() -> QuerySet[Shop]:
    return get_shops_with_tag(*WALLET_AND_BANK_TOKENS)


def get_food_shops() -> QuerySet[Shop]:
    return get_shops_with_tag(*FOOD_TOKENS)


def search_shops(*, search: Optional[str] = None) -> QuerySet[Shop]:
    """
    Get all shops by name, optionally filtered.

    Args:
        search: Case-insensitive term matched against name and location

    Returns:
        QuerySet of shops ordered by name
    """
    queryset = _base_queryset()

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(location__icontains=search)
        )

    return queryset.order_by('name')


def get_homepage_sections(*, top_limit: Optional[int] = None) -> dict:
    """Every homepage section, keyed by section name."""
    return {
        'top_discount': get_top_discount_shops(limit=top_limit),
        'wallet_and_bank': get_wallet_and_bank_shops(),
        'food': get_food_shops(),
        'all': search_shops(),
    }


def promo_badge_label(shop: Shop) -> str:
    """Card label for a shop in the wallet/bank section."""
    if 'bank' in shop.aggregated_promo_tags:
        return 'Bank'
    if 'ewallet' in shop.aggregated_promo_tags:
        return 'E-wallet'
    return 'Special Offer'
