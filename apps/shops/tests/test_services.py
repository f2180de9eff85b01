"""
Service layer tests for shops app.

Tests service functions for:
- Shop Management (create, rebuild, refresh, clear)
- Shop Ranking (top discounts, tag sections, search, badge labels)
"""

import pytest
from uuid import uuid4

from apps.shops.domain import MenuDiscount, MenuItemData, VoucherData
from apps.shops.models import Shop, MenuItem, Voucher
from apps.shops.services import (
    create_shop,
    rebuild_shop_promos,
    refresh_promo_fields,
    get_shop_by_id,
    clear_catalog,
    get_top_discount_shops,
    get_shops_with_tag,
    get_wallet_and_bank_shops,
    get_food_shops,
    search_shops,
    get_homepage_sections,
    promo_badge_label,
)
from apps.shops.services.exceptions import DuplicateShopError, ShopNotFoundError


# ============================================================================
# SHOP MANAGEMENT TESTS
# ============================================================================

@pytest.mark.django_db
class TestCreateShop:
    """Test shop creation with derived promo fields."""

    def test_create_shop_stores_children_in_order(self, shop_kenangan):
        """Menu items and vouchers keep their given order."""
        names = list(shop_kenangan.menu_items.values_list('name', flat=True))

        assert names == ['Kopi Kenangan Mantan', 'Americano']
        assert shop_kenangan.vouchers.count() == 1

    def test_create_shop_computes_promo_fields(self, shop_kenangan):
        shop = Shop.objects.get(id=shop_kenangan.id)

        assert shop.aggregated_promo_tags == 'drink,ewallet'
        assert shop.promo_tags == ['drink', 'ewallet']
        assert shop.active_promo_count == 2
        assert shop.best_promo_text == '10rb Off'
        assert shop.max_effective_discount_value == 10000.0

    def test_create_shop_without_promos(self, shop_no_promo):
        shop = Shop.objects.get(id=shop_no_promo.id)

        assert shop.aggregated_promo_tags == ''
        assert shop.promo_tags == []
        assert shop.active_promo_count == 0
        assert shop.best_promo_text is None
        assert shop.max_effective_discount_value == 0.0

    def test_create_shop_static_fallbacks(self, shop_kenangan):
        assert shop_kenangan.static_distance == 350
        assert shop_kenangan.static_steps == 455
        assert shop_kenangan.static_calories == 22

    def test_create_duplicate_name_fails(self, shop_kenangan):
        """Shop names are unique across the catalog."""
        with pytest.raises(DuplicateShopError):
            create_shop(name='Kopi Kenangan')

        assert Shop.objects.filter(name='Kopi Kenangan').count() == 1

    def test_menu_item_discount_round_trip(self, shop_kenangan):
        """Stored discounts read back as the same value types."""
        first = shop_kenangan.menu_items.get(position=0)
        second = shop_kenangan.menu_items.get(position=1)

        assert first.discount == MenuDiscount(tag='drink', discount_percentage=25)
        assert first.discounted_price == 16500
        assert second.discount is None
        assert second.has_active_discount is False
        assert second.discounted_price == 20000

    def test_create_shop_lowercases_tags(self, db):
        """Tags from direct callers are stored and aggregated in lowercase."""
        shop = create_shop(
            name='Fore Coffee',
            menu_items=[
                MenuItemData(
                    name='Butter Croissant',
                    price=18000,
                    discount=MenuDiscount(tag='Food', discount_percentage=10),
                ),
            ],
            vouchers=[VoucherData(tag='Bank BCA', max_discount_amount=30000)],
        )

        assert shop.menu_items.get().discount_tag == 'food'
        assert shop.vouchers.get().tag == 'bank bca'
        assert shop.aggregated_promo_tags == 'bank bca,food'
        assert promo_badge_label(shop) == 'Bank'

    def test_long_tag_union_is_stored_whole(self, db):
        """The aggregated tags are not capped by a column length."""
        vouchers = [
            VoucherData(tag=letter * 150, max_discount_amount=1000)
            for letter in 'abcdef'
        ]

        shop = create_shop(name='Fore Coffee', vouchers=vouchers)
        shop.refresh_from_db()

        assert len(shop.aggregated_promo_tags) == 6 * 150 + 5
        assert len(shop.promo_tags) == 6


@pytest.mark.django_db
class TestRebuildShopPromos:
    """Test replacing a shop's children."""

    def test_rebuild_replaces_children_and_fields(self, shop_kenangan):
        shop = rebuild_shop_promos(
            shop_id=shop_kenangan.id,
            menu_items=[
                MenuItemData(
                    name='Butter Croissant',
                    price=18000,
                    discount=MenuDiscount(tag='food', discount_percentage=10),
                ),
            ],
            vouchers=[VoucherData(tag='bank bca', max_discount_amount=50000)],
        )

        assert list(shop.menu_items.values_list('name', flat=True)) == ['Butter Croissant']
        assert list(shop.vouchers.values_list('tag', flat=True)) == ['bank bca']
        assert MenuItem.objects.filter(name='Kopi Kenangan Mantan').count() == 0

        shop.refresh_from_db()
        assert shop.aggregated_promo_tags == 'bank bca,food'
        assert shop.active_promo_count == 2
        assert shop.best_promo_text == '50rb Off'
        assert shop.max_effective_discount_value == 50000.0

    def test_rebuild_to_empty_clears_promos(self, shop_kenangan):
        shop = rebuild_shop_promos(shop_id=shop_kenangan.id, menu_items=[], vouchers=[])
        shop.refresh_from_db()

        assert shop.aggregated_promo_tags == ''
        assert shop.best_promo_text is None
        assert shop.max_effective_discount_value == 0.0
        assert Voucher.objects.filter(shop=shop).count() == 0

    def test_rebuild_lowercases_tags(self, shop_kenangan):
        shop = rebuild_shop_promos(
            shop_id=shop_kenangan.id,
            menu_items=[],
            vouchers=[VoucherData(tag='Ewallet OVO', max_discount_amount=20000)],
        )
        shop.refresh_from_db()

        assert list(shop.vouchers.values_list('tag', flat=True)) == ['ewallet ovo']
        assert shop.aggregated_promo_tags == 'ewallet ovo'

    def test_rebuild_nonexistent_shop(self, db):
        with pytest.raises(ShopNotFoundError):
            rebuild_shop_promos(shop_id=uuid4(), menu_items=[], vouchers=[])


@pytest.mark.django_db
class TestRefreshPromoFields:
    """Test recomputing derived fields from stored children."""

    def test_refresh_is_idempotent(self, shop_bank_food):
        before = Shop.objects.get(id=shop_bank_food.id)

        refresh_promo_fields(before)
        after = Shop.objects.get(id=shop_bank_food.id)

        assert after.aggregated_promo_tags == before.aggregated_promo_tags
        assert after.active_promo_count == before.active_promo_count
        assert after.best_promo_text == before.best_promo_text
        assert after.max_effective_discount_value == before.max_effective_discount_value

    def test_refresh_after_child_edit(self, shop_bank_food):
        """Direct child edits take effect once the shop is refreshed."""
        Voucher.objects.filter(shop=shop_bank_food).update(max_discount_amount=1000)

        shop = refresh_promo_fields(shop_bank_food)

        assert shop.best_promo_text == '8rb Off'
        assert shop.max_effective_discount_value == pytest.approx(7600.0)

    def test_saved_child_tag_lowercased(self, shop_no_promo):
        Voucher.objects.create(shop=shop_no_promo, tag='Bank BCA', max_discount_amount=5000)

        shop = refresh_promo_fields(shop_no_promo)

        assert shop.vouchers.get().tag == 'bank bca'
        assert shop.aggregated_promo_tags == 'bank bca'
        assert shop in get_wallet_and_bank_shops()
        assert promo_badge_label(shop) == 'Bank'

    def test_refresh_lowercases_bulk_updated_tags(self, shop_bank_food):
        """Rows updated without save() still aggregate in lowercase."""
        Voucher.objects.filter(shop=shop_bank_food).update(tag='Ewallet OVO')
        MenuItem.objects.filter(shop=shop_bank_food).update(discount_tag='FOOD')

        shop = refresh_promo_fields(shop_bank_food)

        assert shop.aggregated_promo_tags == 'ewallet ovo,food'
        assert promo_badge_label(shop) == 'E-wallet'


@pytest.mark.django_db
class TestShopLookup:
    """Test shop retrieval and catalog clearing."""

    def test_get_shop_by_id(self, shop_kenangan):
        shop = get_shop_by_id(shop_id=shop_kenangan.id)

        assert shop.name == 'Kopi Kenangan'

    def test_get_nonexistent_shop(self, db):
        with pytest.raises(ShopNotFoundError):
            get_shop_by_id(shop_id=uuid4())

    def test_clear_catalog(self, shop_kenangan, shop_bank_food):
        removed = clear_catalog()

        assert removed == 2
        assert Shop.objects.count() == 0
        assert MenuItem.objects.count() == 0
        assert Voucher.objects.count() == 0


# ============================================================================
# SHOP RANKING TESTS
# ============================================================================

@pytest.mark.django_db
class TestTopDiscountShops:
    """Test the top discount section."""

    def test_ordered_by_saving(self, shop_kenangan, shop_bank_food, shop_no_promo):
        """Biggest saving first; shops without promos are excluded."""
        names = [shop.name for shop in get_top_discount_shops()]

        assert names == ['Starbucks', 'Kopi Kenangan']

    def test_ties_ordered_by_name(self, db):
        create_shop(name='Zeta', vouchers=[VoucherData(tag='bank', max_discount_amount=20000)])
        create_shop(name='Alpha', vouchers=[VoucherData(tag='food', max_discount_amount=20000)])

        names = [shop.name for shop in get_top_discount_shops()]

        assert names == ['Alpha', 'Zeta']

    def test_limit(self, shop_kenangan, shop_bank_food):
        names = [shop.name for shop in get_top_discount_shops(limit=1)]

        assert names == ['Starbucks']

    def test_empty_catalog(self, db):
        assert list(get_top_discount_shops()) == []


@pytest.mark.django_db
class TestTagSections:
    """Test the wallet/bank and food sections."""

    def test_wallet_and_bank(self, shop_kenangan, shop_bank_food, shop_no_promo):
        names = [shop.name for shop in get_wallet_and_bank_shops()]

        assert names == ['Kopi Kenangan', 'Starbucks']

    def test_food(self, shop_kenangan, shop_bank_food, shop_no_promo):
        names = [shop.name for shop in get_food_shops()]

        assert names == ['Starbucks']

    def test_substring_match(self, db):
        """Bank vouchers named after the bank still match the bank section."""
        create_shop(name='Fore Coffee', vouchers=[
            VoucherData(tag='bank abc, ewallet xyz', max_discount_amount=30000),
        ])

        assert [shop.name for shop in get_wallet_and_bank_shops()] == ['Fore Coffee']

    def test_shop_in_several_sections(self, shop_bank_food):
        """A shop tagged bank and food appears in both sections."""
        assert shop_bank_food in get_wallet_and_bank_shops()
        assert shop_bank_food in get_food_shops()

    def test_no_tokens(self, shop_kenangan):
        assert list(get_shops_with_tag()) == []

    def test_token_case_insensitive(self, shop_bank_food):
        assert [shop.name for shop in get_shops_with_tag('FOOD')] == ['Starbucks']


@pytest.mark.django_db
class TestSearchShops:
    """Test the all-shops listing."""

    def test_all_by_name(self, shop_kenangan, shop_bank_food, shop_no_promo):
        names = [shop.name for shop in search_shops()]

        assert names == ['Janji Jiwa', 'Kopi Kenangan', 'Starbucks']

    def test_search_by_name(self, shop_kenangan, shop_bank_food):
        names = [shop.name for shop in search_shops(search='kenangan')]

        assert names == ['Kopi Kenangan']

    def test_search_by_location(self, shop_kenangan, shop_bank_food):
        names = [shop.name for shop in search_shops(search='breeze')]

        assert names == ['Starbucks']

    def test_search_no_match(self, shop_kenangan):
        assert list(search_shops(search='espresso bar')) == []


@pytest.mark.django_db
class TestHomepageSections:
    """Test the combined sections."""

    def test_sections(self, shop_kenangan, shop_bank_food, shop_no_promo):
        sections = get_homepage_sections()

        assert set(sections) == {'top_discount', 'wallet_and_bank', 'food', 'all'}
        assert [s.name for s in sections['top_discount']] == ['Starbucks', 'Kopi Kenangan']
        assert [s.name for s in sections['food']] == ['Starbucks']
        assert len(sections['all']) == 3

    def test_top_limit(self, shop_kenangan, shop_bank_food):
        sections = get_homepage_sections(top_limit=1)

        assert len(sections['top_discount']) == 1


@pytest.mark.django_db
class TestPromoBadgeLabel:
    """Test the wallet/bank card label."""

    def test_bank(self, shop_bank_food):
        assert promo_badge_label(shop_bank_food) == 'Bank'

    def test_ewallet(self, shop_kenangan):
        assert promo_badge_label(shop_kenangan) == 'E-wallet'

    def test_other(self, shop_no_promo):
        assert promo_badge_label(shop_no_promo) == 'Special Offer'
