"""Shop aggregate construction and rebuild service."""

import logging
from dataclasses import replace
from django.db import transaction
from uuid import UUID
from typing import Sequence

from ..domain import MenuItemData, VoucherData
from ..models import Shop, MenuItem, Voucher
from .exceptions import ShopNotFoundError, DuplicateShopError
from .promo_evaluation import compute_promo_summary

logger = logging.getLogger(__name__)

PROMO_FIELDS = [
    'aggregated_promo_tags',
    'max_effective_discount_value',
    'best_promo_text',
    'active_promo_count',
    'updated_at',
]


def _apply_promo_summary(shop: Shop, menu_items: Sequence, vouchers: Sequence) -> Shop:
    summary = compute_promo_summary(menu_items, vouchers)
    shop.aggregated_promo_tags = summary.aggregated_promo_tags
    shop.max_effective_discount_value = summary.max_effective_discount_value
    shop.best_promo_text = summary.best_promo_text
    shop.active_promo_count = summary.active_promo_count
    shop.save(update_fields=PROMO_FIELDS)
    return shop


def _normalize_tags(
    menu_items: Sequence[MenuItemData],
    vouchers: Sequence[VoucherData],
) -> tuple[list[MenuItemData], list[VoucherData]]:
    """Lowercase every menu discount and voucher tag."""
    menu_items = [
        replace(item, discount=replace(item.discount, tag=item.discount.tag.lower()))
        if item.discount else item
        for item in menu_items
    ]
    vouchers = [replace(voucher, tag=voucher.tag.lower()) for voucher in vouchers]
    return menu_items, vouchers


def _write_children(
    shop: Shop,
    menu_items: Sequence[MenuItemData],
    vouchers: Sequence[VoucherData],
) -> None:
    MenuItem.objects.bulk_create([
        MenuItem(
            shop=shop,
            position=position,
            name=item.name,
            price=item.price,
            discount_tag=item.discount.tag if item.discount else '',
            discount_percentage=item.discount.discount_percentage if item.discount else None,
            image=item.image,
        )
        for position, item in enumerate(menu_items)
    ])
    Voucher.objects.bulk_create([
        Voucher(
            shop=shop,
            position=position,
            tag=voucher.tag,
            max_discount_amount=voucher.max_discount_amount,
            min_usage_amount=voucher.min_usage_amount,
            image=voucher.image,
        )
        for position, voucher in enumerate(vouchers)
    ])


@transaction.atomic
def create_shop(
    *,
    name: str,
    location: str = '',
    distance: int = 0,
    steps: int = 0,
    calories: int = 0,
    latitude: float = 0.0,
    longitude: float = 0.0,
    logo: str = '',
    header_image: str = '',
    menu_items: Sequence[MenuItemData] = (),
    vouchers: Sequence[VoucherData] = (),
) -> Shop:
    """
    Create a shop together with its menu items and vouchers.

    The derived promo fields are computed from the given menu items and
    vouchers and stored in the same transaction.

    Args:
        name: Display name, unique across the catalog
        location: Location label
        distance: Static fallback distance in metres
        steps: Static fallback step count
        calories: Static fallback calories
        latitude: Shop latitude
        longitude: Shop longitude
        logo: Logo image reference
        header_image: Header image reference
        menu_items: Menu items in display order
        vouchers: Vouchers in display order

    Returns:
        Created Shop instance

    Raises:
        DuplicateShopError: If a shop with this name already exists
    """
    if Shop.objects.filter(name=name).exists():
        raise DuplicateShopError(f"Shop '{name}' already exists")

    menu_items, vouchers = _normalize_tags(menu_items, vouchers)

    shop = Shop.objects.create(
        name=name,
        location=location,
        static_distance=distance,
        static_steps=steps,
        static_calories=calories,
        latitude=latitude,
        longitude=longitude,
        logo=logo,
        header_image=header_image,
    )
    _write_children(shop, menu_items, vouchers)
    _apply_promo_summary(shop, menu_items, vouchers)

    logger.info(
        "Created shop %s (menu items: %d, vouchers: %d, tags: '%s')",
        shop.name, len(menu_items), len(vouchers), shop.aggregated_promo_tags,
    )
    return shop


@transaction.atomic
def rebuild_shop_promos(
    *,
    shop_id: UUID,
    menu_items: Sequence[MenuItemData],
    vouchers: Sequence[VoucherData],
) -> Shop:
    """
    Replace the menu items and vouchers of a shop.

    Children are never edited in place: the old rows are dropped, the new
    ones written and the promo fields recomputed, all under a row lock.

    Args:
        shop_id: Shop UUID
        menu_items: New menu items in display order
        vouchers: New vouchers in display order

    Returns:
        Updated Shop instance

    Raises:
        ShopNotFoundError: If shop doesn't exist
    """
    try:
        shop = (
            Shop.objects
            .select_for_update()
            .get(id=shop_id)
        )
    except Shop.DoesNotExist:
        raise ShopNotFoundError(f"Shop {shop_id} not found")

    menu_items, vouchers = _normalize_tags(menu_items, vouchers)
    shop.menu_items.all().delete()
    shop.vouchers.all().delete()
    _write_children(shop, menu_items, vouchers)
    return _apply_promo_summary(shop, menu_items, vouchers)


@transaction.atomic
def refresh_promo_fields(shop: Shop) -> Shop:
    """Recompute the derived promo fields from the stored children."""
    menu_items, vouchers = _normalize_tags(
        [item.to_data() for item in shop.menu_items.order_by('position')],
        [voucher.to_data() for voucher in shop.vouchers.order_by('position')],
    )
    return _apply_promo_summary(shop, menu_items, vouchers)


def get_shop_by_id(*, shop_id: UUID) -> Shop:
    """
    Get shop by ID.

    Raises:
        ShopNotFoundError: If shop doesn't exist
    """
    try:
        return Shop.objects.prefetch_related('menu_items', 'vouchers').get(id=shop_id)
    except Shop.DoesNotExist:
        raise ShopNotFoundError(f"Shop {shop_id} not found")


@transaction.atomic
def clear_catalog() -> int:
    """Delete every shop; returns the number of shops removed."""
    count = Shop.objects.count()
    Shop.objects.all().delete()
    logger.info("Cleared catalog (%d shops)", count)
    return count
