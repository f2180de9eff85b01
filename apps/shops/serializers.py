from rest_framework import serializers
from .models import Shop, MenuItem, Voucher, WalkSession
from .services import promo_badge_label


class MenuItemSerializer(serializers.ModelSerializer):
    """Serializer for menu items, including the discounted price."""

    has_active_discount = serializers.BooleanField(read_only=True)
    discounted_price = serializers.IntegerField(read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id',
            'position',
            'name',
            'price',
            'discount_tag',
            'discount_percentage',
            'has_active_discount',
            'discounted_price',
            'image',
        ]
        read_only_fields = fields


class VoucherSerializer(serializers.ModelSerializer):
    """Serializer for shop vouchers."""

    class Meta:
        model = Voucher
        fields = [
            'id',
            'position',
            'tag',
            'max_discount_amount',
            'min_usage_amount',
            'image',
        ]
        read_only_fields = fields


class ShopListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views and homepage sections."""

    promo_tags = serializers.ListField(child=serializers.CharField(), read_only=True)
    badge_label = serializers.SerializerMethodField()

    class Meta:
        model = Shop
        fields = [
            'id',
            'name',
            'location',
            'logo',
            'header_image',
            'static_distance',
            'best_promo_text',
            'active_promo_count',
            'max_effective_discount_value',
            'promo_tags',
            'badge_label',
        ]
        read_only_fields = fields

    def get_badge_label(self, obj) -> str:
        return promo_badge_label(obj)


class ShopSerializer(serializers.ModelSerializer):
    """Main serializer for shops."""

    menu_items = MenuItemSerializer(many=True, read_only=True)
    vouchers = VoucherSerializer(many=True, read_only=True)
    promo_tags = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = Shop
        fields = [
            'id',
            'name',
            'location',
            'static_distance',
            'static_steps',
            'static_calories',
            'latitude',
            'longitude',
            'logo',
            'header_image',
            'aggregated_promo_tags',
            'promo_tags',
            'max_effective_discount_value',
            'best_promo_text',
            'active_promo_count',
            'menu_items',
            'vouchers',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class HomepageSectionsSerializer(serializers.Serializer):
    """Every homepage section at once."""

    top_discount = ShopListSerializer(many=True)
    wallet_and_bank = ShopListSerializer(many=True)
    food = ShopListSerializer(many=True)
    all = ShopListSerializer(many=True)


# =============================================================================
# Input serializers
# =============================================================================

class ShopSearchQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)


class TopDiscountQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100)


class UserLocationQuerySerializer(serializers.Serializer):
    """Optional user position; both coordinates or neither."""

    latitude = serializers.FloatField(required=False, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, min_value=-180, max_value=180)

    def validate(self, attrs):
        if ('latitude' in attrs) != ('longitude' in attrs):
            raise serializers.ValidationError(
                'latitude and longitude must be given together.'
            )
        return attrs


class ShopIngestSerializer(serializers.Serializer):
    """Raw shop records in the seed feed format."""

    shops = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class PromoRebuildSerializer(serializers.Serializer):
    """Replacement menu and vouchers, in the seed feed format."""

    menu = serializers.ListField(child=serializers.DictField(), required=False, default=list)
    voucher = serializers.ListField(child=serializers.DictField(), required=False, default=list)


class WalkStartSerializer(serializers.Serializer):
    shop = serializers.UUIDField()


class WalkListQuerySerializer(serializers.Serializer):
    shop = serializers.UUIDField(required=False)


class WalkProgressSerializer(UserLocationQuerySerializer):
    steps = serializers.IntegerField(min_value=0)


# =============================================================================
# Response serializers
# =============================================================================

class WalkMetricsSerializer(serializers.Serializer):
    distance = serializers.CharField()
    steps = serializers.CharField()
    calories = serializers.CharField()
    distance_m = serializers.FloatField(allow_null=True)
    is_live = serializers.BooleanField()


class IngestionResultSerializer(serializers.Serializer):
    created = serializers.IntegerField()
    skipped = serializers.ListField(child=serializers.CharField(allow_null=True))
    errors = serializers.ListField(child=serializers.DictField())


class WalkSessionSerializer(serializers.ModelSerializer):
    shop_name = serializers.CharField(source='shop.name', read_only=True)

    class Meta:
        model = WalkSession
        fields = [
            'id',
            'shop',
            'shop_name',
            'status',
            'steps',
            'calories',
            'remaining_distance',
            'last_latitude',
            'last_longitude',
            'started_at',
            'ended_at',
        ]
        read_only_fields = fields


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
