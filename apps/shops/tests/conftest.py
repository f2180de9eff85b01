import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from apps.shops.domain import MenuDiscount, MenuItemData, VoucherData
from apps.shops.services import create_shop

User = get_user_model()


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        username='walker',
        email='walker@example.com',
        password='testpass123',
    )


@pytest.fixture
def staff_user(db):
    """Create and return a staff user allowed to ingest shops."""
    return User.objects.create_user(
        username='curator',
        email='curator@example.com',
        password='testpass123',
        is_staff=True,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def staff_client(api_client, staff_user):
    """Return an API client authenticated as staff."""
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def shop_kenangan(db):
    """Shop with a drink discount and an e-wallet voucher."""
    return create_shop(
        name='Kopi Kenangan',
        location='GOP 9, Green Office Park',
        distance=350,
        steps=455,
        calories=22,
        latitude=-6.3017,
        longitude=106.6527,
        logo='kenanganlogo',
        header_image='kenanganimg',
        menu_items=[
            MenuItemData(
                name='Kopi Kenangan Mantan',
                price=22000,
                discount=MenuDiscount(tag='drink', discount_percentage=25),
            ),
            MenuItemData(name='Americano', price=20000),
        ],
        vouchers=[
            VoucherData(tag='ewallet', max_discount_amount=10000, min_usage_amount=50000),
        ],
    )


@pytest.fixture
def shop_bank_food(db):
    """Shop whose tags are bank and food."""
    return create_shop(
        name='Starbucks',
        location='The Breeze BSD',
        distance=1200,
        steps=1560,
        calories=78,
        latitude=-6.3019,
        longitude=106.6530,
        menu_items=[
            MenuItemData(
                name='Banana Bread',
                price=38000,
                discount=MenuDiscount(tag='food', discount_percentage=20),
            ),
        ],
        vouchers=[
            VoucherData(tag='bank', max_discount_amount=50000, min_usage_amount=100000),
        ],
    )


@pytest.fixture
def shop_no_promo(db):
    """Shop without any active promo."""
    return create_shop(
        name='Janji Jiwa',
        location='ICE BSD',
        distance=640,
        steps=832,
        calories=41,
        menu_items=[
            MenuItemData(
                name='Kopi Susu',
                price=18000,
                discount=MenuDiscount(tag='drink', discount_percentage=0),
            ),
        ],
    )


@pytest.fixture
def shop_records():
    """Raw records in the seed feed format."""
    return [
        {
            'name': 'Tomoro Coffee',
            'location': 'Unilever Campus',
            'distance': 800,
            'steps': 1040,
            'calories': 52,
            'latitude': -6.3046,
            'longitude': 106.6441,
            'logo': 'tomorologo',
            'img': 'tomoroimg',
            'menu': [
                {
                    'menuName': 'Aren Latte',
                    'price': 20000,
                    'discount': {'tag': 'Drink', 'discountPercentage': 25},
                    'img': 'arenlatte',
                },
            ],
            'voucher': [
                {'tag': 'Bank ABC, Ewallet XYZ', 'maxDisc': '30', 'minUsage': '50', 'img': 'voucher'},
            ],
        },
        {
            'name': 'Fore Coffee',
            'location': 'AEON Mall BSD',
            'distance': 2100,
            'steps': 2730,
            'calories': 136,
            'latitude': -6.3043,
            'longitude': 106.6436,
            'logo': 'forelogo',
            'img': 'foreimg',
            'voucher': [
                {'tag': 'FOOD', 'maxDisc': 'abc', 'minUsage': '40', 'img': 'forevoucher'},
            ],
        },
    ]
