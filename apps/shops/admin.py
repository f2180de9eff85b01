from django.contrib import admin
from apps.shops.models import Shop, MenuItem, Voucher, WalkSession
from apps.shops.services import refresh_promo_fields


class MenuItemInline(admin.TabularInline):
    """Inline admin for shop menu items."""
    model = MenuItem
    extra = 1
    fields = [
        'position',
        'name',
        'price',
        'discount_tag',
        'discount_percentage',
        'image',
    ]


class VoucherInline(admin.TabularInline):
    """Inline admin for shop vouchers."""
    model = Voucher
    extra = 1
    fields = [
        'position',
        'tag',
        'max_discount_amount',
        'min_usage_amount',
        'image',
    ]


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    """Admin interface for Shops."""

    list_display = [
        'name',
        'location',
        'best_promo_text',
        'max_effective_discount_value',
        'active_promo_count',
        'aggregated_promo_tags',
        'updated_at',
    ]
    list_filter = ['created_at']
    search_fields = ['name', 'location', 'aggregated_promo_tags']
    readonly_fields = [
        'aggregated_promo_tags',
        'max_effective_discount_value',
        'best_promo_text',
        'active_promo_count',
        'created_at',
        'updated_at',
    ]
    inlines = [MenuItemInline, VoucherInline]
    ordering = ['name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'location', 'logo', 'header_image')
        }),
        ('Location', {
            'fields': (
                'latitude',
                'longitude',
                'static_distance',
                'static_steps',
                'static_calories',
            )
        }),
        ('Promos (Auto-generated)', {
            'fields': (
                'aggregated_promo_tags',
                'max_effective_discount_value',
                'best_promo_text',
                'active_promo_count',
            ),
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['recompute_promos']

    def save_related(self, request, form, formsets, change):
        """Recompute promo fields once the inlines are saved."""
        super().save_related(request, form, formsets, change)
        refresh_promo_fields(form.instance)

    def recompute_promos(self, request, queryset):
        """Recompute promo fields of selected shops."""
        for shop in queryset:
            refresh_promo_fields(shop)
        self.message_user(request, f"Recomputed promos for {queryset.count()} shops")
    recompute_promos.short_description = "Recompute promo fields"


@admin.register(WalkSession)
class WalkSessionAdmin(admin.ModelAdmin):
    """Admin interface for Walk Sessions."""

    list_display = ['shop', 'status', 'steps', 'calories', 'remaining_distance', 'started_at']
    list_filter = ['status', 'started_at']
    search_fields = ['shop__name']
    readonly_fields = ['started_at', 'ended_at']
    ordering = ['-started_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('shop')
