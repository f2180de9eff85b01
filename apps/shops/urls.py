from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'shops'

# Router for ViewSets
# Note: walks must be registered BEFORE empty prefix to avoid URL conflicts
router = DefaultRouter()
router.register(r'walks', views.WalkSessionViewSet, basename='walk')
router.register(r'', views.ShopViewSet, basename='shop')

urlpatterns = [
    # Shop ViewSet routes
    # GET    /api/shops/                         - List shops (?search=)
    # GET    /api/shops/{id}/                    - Shop details with menu and vouchers

    # Homepage sections
    # GET    /api/shops/top-discounts/           - Biggest saving first (?limit=)
    # GET    /api/shops/wallet-bank/             - E-wallet and bank promos
    # GET    /api/shops/food/                    - Food promos
    # GET    /api/shops/sections/                - All sections at once

    # Custom actions
    # GET    /api/shops/{id}/walk-metrics/       - Distance/steps/kcal (?latitude=&longitude=)
    # POST   /api/shops/ingest/                  - Ingest seed records (admin)
    # POST   /api/shops/{id}/rebuild-promos/     - Replace menu and vouchers (admin)

    # Walk routes
    # GET    /api/shops/walks/                   - List walks (?shop=)
    # POST   /api/shops/walks/                   - Start a walk
    # GET    /api/shops/walks/{id}/              - Walk details
    # POST   /api/shops/walks/{id}/progress/     - Record steps and position
    # POST   /api/shops/walks/{id}/cancel/       - Cancel a walk

    # Include router URLs
    path('', include(router.urls)),
]
