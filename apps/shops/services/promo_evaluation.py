"""
Promo evaluation service.

Pure functions deriving promo display and ranking data from a shop's menu
items and vouchers. They accept either the value types from
``apps.shops.domain`` or the ORM rows, since both expose the same attributes:

- menu items: ``price``, ``discount`` (``tag``, ``discount_percentage``)
  and ``has_active_discount``
- vouchers: ``tag`` and ``max_discount_amount``

Nothing here touches the database.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

TAG_SEPARATOR = ','


@dataclass(frozen=True)
class BestPromo:
    """Winning saving of a shop and the label shown on its badge."""

    value: float
    label: Optional[str]


@dataclass(frozen=True)
class PromoSummary:
    """All derived promo fields of a shop, computed together."""

    tags: tuple
    aggregated_promo_tags: str
    active_promo_count: int
    best_promo_text: Optional[str]
    max_effective_discount_value: float


def split_tags(raw: Optional[str]) -> list[str]:
    """Split a comma separated tag string, dropping blank fragments."""
    if not raw:
        return []
    fragments = (fragment.strip() for fragment in raw.split(TAG_SEPARATOR))
    return [fragment for fragment in fragments if fragment]


def aggregate_tags(menu_items: Iterable, vouchers: Iterable) -> set[str]:
    """
    Collect the promo tags of a shop.

    Every voucher contributes its tags; menu items contribute only when their
    discount is active.

    Args:
        menu_items: Menu items of the shop
        vouchers: Vouchers of the shop

    Returns:
        Set of normalized tags (empty when there are no promos)
    """
    tags = set()
    for voucher in vouchers:
        tags.update(split_tags(voucher.tag))
    for item in menu_items:
        if item.has_active_discount:
            tags.update(split_tags(item.discount.tag))
    return tags


def serialize_tags(tags: Iterable[str]) -> str:
    return TAG_SEPARATOR.join(sorted(set(tags)))


def unique_active_promo_tags(menu_items: Iterable, vouchers: Iterable) -> list[str]:
    """Aggregated tags as a sorted list for stable display order."""
    return sorted(aggregate_tags(menu_items, vouchers))


def active_promo_count(menu_items: Iterable, vouchers: Sequence) -> int:
    """
    Count promo instances, not unique tags.

    A shop with 3 vouchers and 1 discounted item has 4 promos even when
    their tags overlap.
    """
    discounted = sum(1 for item in menu_items if item.has_active_discount)
    return len(vouchers) + discounted


def round_to_thousands(amount: float) -> int:
    """Round a Rupiah amount to whole thousands, halves away from zero."""
    thousands = Decimal(amount) / Decimal(1000)
    return int(thousands.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _absolute_saving_label(saving: float) -> str:
    thousands = round_to_thousands(saving)
    if thousands > 0:
        return f"{thousands}rb Off"
    return f"Rp{int(saving)} Off"


def evaluate_best_promo(menu_items: Iterable, vouchers: Iterable) -> BestPromo:
    """
    Find the single most valuable promo of a shop.

    Menu discounts are evaluated before vouchers, each in stored order.
    Only a strictly greater saving replaces the current best, so the first
    candidate reaching a value wins ties. The label is recomputed every time
    the best value changes.

    Args:
        menu_items: Menu items of the shop
        vouchers: Vouchers of the shop

    Returns:
        BestPromo with value 0.0 and no label when nothing qualifies
    """
    best_value = 0.0
    label = None

    for item in menu_items:
        if not item.has_active_discount:
            continue
        percentage = item.discount.discount_percentage
        saving = item.price * (percentage / 100)
        if saving > best_value:
            best_value = saving
            thousands = round_to_thousands(saving)
            if thousands > 0:
                label = f"{thousands}rb Off"
            else:
                label = f"{percentage}% Off"

    for voucher in vouchers:
        saving = float(voucher.max_discount_amount)
        if saving > best_value:
            best_value = saving
            label = _absolute_saving_label(saving)

    if best_value <= 0:
        return BestPromo(value=0.0, label=None)
    return BestPromo(value=best_value, label=label)


def best_promo_text(menu_items: Iterable, vouchers: Iterable) -> Optional[str]:
    return evaluate_best_promo(menu_items, vouchers).label


def max_effective_discount_value(menu_items: Iterable, vouchers: Iterable) -> float:
    """Largest absolute saving of any single promo, 0.0 if none."""
    return evaluate_best_promo(menu_items, vouchers).value


def compute_promo_summary(menu_items: Sequence, vouchers: Sequence) -> PromoSummary:
    """
    Compute every derived promo field of a shop in one pass.

    Shop factories store the result as-is so the derived fields always
    describe the same menu items and vouchers.
    """
    menu_items = list(menu_items)
    vouchers = list(vouchers)
    tags = unique_active_promo_tags(menu_items, vouchers)
    best = evaluate_best_promo(menu_items, vouchers)
    return PromoSummary(
        tags=tuple(tags),
        aggregated_promo_tags=serialize_tags(tags),
        active_promo_count=active_promo_count(menu_items, vouchers),
        best_promo_text=best.label,
        max_effective_discount_value=best.value,
    )
