"""
Catalog ingestion service.

Turns shop records from the seed feed into Shop aggregates. The feed uses
the original JSON shape::

    {
        "name": "Kopi Kenangan",
        "location": "GOP 9",
        "distance": 120, "steps": 160, "calories": 8,
        "latitude": -6.30, "longitude": 106.65,
        "logo": "kenanganlogo", "img": "kenanganimg",
        "menu": [{"menuName": "Latte", "price": 22000,
                  "discount": {"tag": "Drink", "discountPercentage": 25},
                  "img": "latte"}],
        "voucher": [{"tag": "Bank ABC, Ewallet XYZ", "maxDisc": "30",
                     "minUsage": "50", "img": "voucher"}]
    }

Voucher amounts are strings in thousands of Rupiah. Tags are lowercased
here, once, at ingestion.

Ingestion is best effort: a record that cannot be parsed, or whose name is
already taken, is logged and skipped while the rest of the feed is loaded.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from django.db import DatabaseError

from ..domain import MenuDiscount, MenuItemData, VoucherData
from ..models import Shop, MenuItem, Voucher
from .exceptions import CatalogFileError, DuplicateShopError, InvalidShopRecordError
from .shop_management import create_shop

logger = logging.getLogger(__name__)

AMOUNT_UNIT = 1000
AMOUNT_PATTERN = re.compile(r"\+?\d+", re.ASCII)


@dataclass
class IngestionResult:
    created: list = field(default_factory=list)
    skipped: list = field(default_factory=list)
    errors: list = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)


def parse_amount(raw: Any) -> int:
    """
    Parse a voucher amount given in thousands into Rupiah.

    ``"30"`` becomes 30000. Anything but ASCII digits with an optional
    leading ``+`` (``"abc"``, ``"2.5"``, ``"-5"``, ``"3_0"``, ``None``) becomes 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    text = str(raw).strip()
    if not AMOUNT_PATTERN.fullmatch(text):
        return 0
    return int(text) * AMOUNT_UNIT


def _require(record: dict, key: str) -> Any:
    if key not in record or record[key] is None:
        raise InvalidShopRecordError(f"Missing field '{key}'")
    return record[key]


def _text(value: Any, model, field_name: str) -> str:
    """Feed string for a model field; null becomes empty, over-long is rejected."""
    text = '' if value is None else str(value)
    max_length = model._meta.get_field(field_name).max_length
    if max_length is not None and len(text) > max_length:
        raise InvalidShopRecordError(
            f"{model.__name__}.{field_name} longer than {max_length} characters"
        )
    return text


def parse_menu_item(raw: dict) -> MenuItemData:
    """Build a menu item from a feed entry."""
    try:
        price = int(_require(raw, 'price'))
    except (TypeError, ValueError):
        raise InvalidShopRecordError(f"Invalid price {raw.get('price')!r}")
    if price < 0:
        raise InvalidShopRecordError(f"Negative price {price}")

    discount = None
    raw_discount = raw.get('discount')
    if raw_discount:
        if not isinstance(raw_discount, dict):
            raise InvalidShopRecordError(f"Invalid discount {raw_discount!r}")
        try:
            percentage = int(raw_discount.get('discountPercentage', 0))
        except (TypeError, ValueError):
            raise InvalidShopRecordError(
                f"Invalid discountPercentage {raw_discount.get('discountPercentage')!r}"
            )
        if not 0 <= percentage <= 100:
            raise InvalidShopRecordError(f"discountPercentage {percentage} outside 0-100")
        discount = MenuDiscount(
            tag=_text(raw_discount.get('tag'), MenuItem, 'discount_tag').lower(),
            discount_percentage=percentage,
        )

    return MenuItemData(
        name=_text(_require(raw, 'menuName'), MenuItem, 'name'),
        price=price,
        discount=discount,
        image=_text(raw.get('img'), MenuItem, 'image'),
    )


def parse_voucher(raw: dict) -> VoucherData:
    """Build a voucher from a feed entry; malformed amounts become 0."""
    return VoucherData(
        tag=_text(raw.get('tag'), Voucher, 'tag').lower(),
        max_discount_amount=parse_amount(raw.get('maxDisc')),
        min_usage_amount=parse_amount(raw.get('minUsage')),
        image=_text(raw.get('img'), Voucher, 'image'),
    )


def parse_shop_record(record: dict) -> dict:
    """
    Convert a feed record into keyword arguments for ``create_shop``.

    Raises:
        InvalidShopRecordError: If a required field is missing, mistyped
            or longer than its column
    """
    if not isinstance(record, dict):
        raise InvalidShopRecordError(f"Expected an object, got {type(record).__name__}")

    try:
        parsed = {
            'name': _text(_require(record, 'name'), Shop, 'name'),
            'location': _text(record.get('location'), Shop, 'location'),
            'distance': int(record.get('distance', 0)),
            'steps': int(record.get('steps', 0)),
            'calories': int(record.get('calories', 0)),
            'latitude': float(record.get('latitude', 0.0)),
            'longitude': float(record.get('longitude', 0.0)),
            'logo': _text(record.get('logo'), Shop, 'logo'),
            'header_image': _text(record.get('img'), Shop, 'header_image'),
            'menu_items': [parse_menu_item(entry) for entry in record.get('menu') or []],
            'vouchers': [parse_voucher(entry) for entry in record.get('voucher') or []],
        }
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidShopRecordError(f"Malformed shop record: {e}")

    for key in ('distance', 'steps', 'calories'):
        if parsed[key] < 0:
            raise InvalidShopRecordError(f"Negative {key} {parsed[key]}")
    return parsed


def ingest_shop_records(records: Iterable[dict]) -> IngestionResult:
    """
    Create shops from feed records.

    Args:
        records: Shop records in feed order

    Returns:
        IngestionResult listing created shops, skipped names and errors
    """
    result = IngestionResult()

    for index, record in enumerate(records):
        try:
            shop = create_shop(**parse_shop_record(record))
        except InvalidShopRecordError as e:
            logger.warning("Skipping shop record #%d: %s", index, e)
            result.errors.append({'index': index, 'error': str(e)})
            continue
        except DuplicateShopError as e:
            logger.warning("Skipping shop record #%d: %s", index, e)
            result.skipped.append(record.get('name'))
            continue
        except DatabaseError as e:
            logger.error("Skipping shop record #%d, database rejected it: %s", index, e)
            result.errors.append({'index': index, 'error': str(e)})
            continue
        result.created.append(shop)

    logger.info(
        "Ingested %d shops (%d duplicates skipped, %d invalid)",
        result.created_count, len(result.skipped), len(result.errors),
    )
    return result


def load_records(path) -> list:
    """
    Read shop records from a JSON file.

    Raises:
        CatalogFileError: If the file is missing, unreadable or not a list
    """
    path = Path(path)
    try:
        with path.open(encoding='utf-8') as fh:
            data = json.load(fh)
    except FileNotFoundError:
        raise CatalogFileError(f"Seed file {path} not found")
    except json.JSONDecodeError as e:
        raise CatalogFileError(f"Seed file {path} is not valid JSON: {e}")

    if not isinstance(data, list):
        raise CatalogFileError(f"Seed file {path} must contain a list of shops")
    return data


def seed_catalog_if_empty(path) -> Optional[IngestionResult]:
    """
    Load the seed file only when the catalog has no shops yet.

    Returns:
        IngestionResult, or None when the catalog was already populated
    """
    existing = Shop.objects.count()
    if existing > 0:
        logger.info("Catalog already has %d shops, not seeding", existing)
        return None

    records = load_records(path)
    if not records:
        logger.warning("Seed file %s contains no shops", path)
    return ingest_shop_records(records)
