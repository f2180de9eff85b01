from django.db import models
from django.core.validators import MaxValueValidator, MinValueValidator
import uuid

from .domain import MenuDiscount, MenuItemData, VoucherData


class Shop(models.Model):
    """
    Coffee shop aggregate.

    The promo fields at the bottom are derived from the menu items and
    vouchers and are written only by the services in
    ``apps.shops.services.shop_management``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    location = models.CharField(max_length=255, blank=True)

    # Static fallbacks shown when the user's position is unknown
    static_distance = models.PositiveIntegerField(default=0)
    static_steps = models.PositiveIntegerField(default=0)
    static_calories = models.PositiveIntegerField(default=0)

    latitude = models.FloatField(default=0.0)
    longitude = models.FloatField(default=0.0)
    logo = models.CharField(max_length=200, blank=True)
    header_image = models.CharField(max_length=200, blank=True)

    # Derived promo fields
    aggregated_promo_tags = models.TextField(blank=True, default='', editable=False)
    max_effective_discount_value = models.FloatField(default=0.0, editable=False)
    best_promo_text = models.CharField(max_length=50, null=True, blank=True, editable=False)
    active_promo_count = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shops'
        indexes = [
            models.Index(fields=['max_effective_discount_value'], name='shops_max_disc_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def promo_tags(self):
        if not self.aggregated_promo_tags:
            return []
        return self.aggregated_promo_tags.split(',')


class MenuItem(models.Model):
    """Menu entry of a shop with an optional percentage discount."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name='menu_items')
    position = models.PositiveIntegerField(default=0)
    name = models.CharField(max_length=200)
    price = models.PositiveIntegerField()
    discount_tag = models.CharField(max_length=200, blank=True)
    discount_percentage = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    image = models.CharField(max_length=200, blank=True)

    class Meta:
        db_table = 'shop_menu_items'
        ordering = ['position']
        indexes = [
            models.Index(fields=['shop', 'position'], name='menu_items_shop_pos_idx'),
        ]

    def __str__(self):
        return f"{self.shop.name} - {self.name}"

    def save(self, *args, **kwargs):
        self.discount_tag = self.discount_tag.lower()
        super().save(*args, **kwargs)

    @property
    def discount(self):
        if self.discount_percentage is None:
            return None
        return MenuDiscount(tag=self.discount_tag, discount_percentage=self.discount_percentage)

    @property
    def has_active_discount(self):
        return self.discount is not None and self.discount.is_active

    @property
    def discounted_price(self):
        return self.to_data().discounted_price

    def to_data(self) -> MenuItemData:
        return MenuItemData(
            name=self.name,
            price=self.price,
            discount=self.discount,
            image=self.image,
        )


class Voucher(models.Model):
    """Shop-level voucher with absolute Rupiah amounts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name='vouchers')
    position = models.PositiveIntegerField(default=0)
    tag = models.CharField(max_length=200, blank=True)
    max_discount_amount = models.PositiveIntegerField(default=0)
    min_usage_amount = models.PositiveIntegerField(default=0)
    image = models.CharField(max_length=200, blank=True)

    class Meta:
        db_table = 'shop_vouchers'
        ordering = ['position']
        indexes = [
            models.Index(fields=['shop', 'position'], name='vouchers_shop_pos_idx'),
        ]

    def __str__(self):
        return f"{self.shop.name} - {self.tag or 'voucher'}"

    def save(self, *args, **kwargs):
        self.tag = self.tag.lower()
        super().save(*args, **kwargs)

    def to_data(self) -> VoucherData:
        return VoucherData(
            tag=self.tag,
            max_discount_amount=self.max_discount_amount,
            min_usage_amount=self.min_usage_amount,
            image=self.image,
        )


class WalkStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    ARRIVED = 'arrived', 'Arrived'
    CANCELLED = 'cancelled', 'Cancelled'


class WalkSession(models.Model):
    """A user's walk toward a chosen shop, with pedometer progress."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name='walk_sessions')
    status = models.CharField(max_length=20, choices=WalkStatus.choices, default=WalkStatus.ACTIVE)
    steps = models.PositiveIntegerField(default=0)
    calories = models.FloatField(default=0.0)
    remaining_distance = models.FloatField(null=True, blank=True)
    last_latitude = models.FloatField(null=True, blank=True)
    last_longitude = models.FloatField(null=True, blank=True)
    started_at = models.DateTimeField(auto_now_add=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'shop_walk_sessions'
        ordering = ['-started_at']
        indexes = [
            models.Index(fields=['shop', 'status'], name='walks_shop_status_idx'),
        ]

    def __str__(self):
        return f"Walk to {self.shop.name} ({self.status})"
