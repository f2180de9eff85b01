"""Plain value types for shop promos, independent of the ORM."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MenuDiscount:
    """Percentage discount attached to a single menu item."""

    tag: str
    discount_percentage: int

    @property
    def is_active(self) -> bool:
        return self.discount_percentage > 0


@dataclass(frozen=True)
class MenuItemData:
    name: str
    price: int
    discount: Optional[MenuDiscount] = None
    image: str = ''

    @property
    def has_active_discount(self) -> bool:
        return self.discount is not None and self.discount.is_active

    @property
    def discounted_price(self) -> int:
        if not self.has_active_discount:
            return self.price
        return self.price - int(self.price * (self.discount.discount_percentage / 100))


@dataclass(frozen=True)
class VoucherData:
    """Shop-level voucher; amounts are absolute Rupiah values."""

    tag: str
    max_discount_amount: int
    min_usage_amount: int = 0
    image: str = ''


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
