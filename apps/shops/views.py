from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .domain import GeoPoint
from .models import Shop, WalkSession
from .serializers import (
    ShopSerializer,
    ShopListSerializer,
    HomepageSectionsSerializer,
    ShopSearchQuerySerializer,
    TopDiscountQuerySerializer,
    UserLocationQuerySerializer,
    ShopIngestSerializer,
    PromoRebuildSerializer,
    WalkStartSerializer,
    WalkProgressSerializer,
    WalkListQuerySerializer,
    WalkMetricsSerializer,
    IngestionResultSerializer,
    WalkSessionSerializer,
    ErrorSerializer,
)
from .services import (
    search_shops,
    get_top_discount_shops,
    get_wallet_and_bank_shops,
    get_food_shops,
    get_homepage_sections,
    ingest_shop_records,
    rebuild_shop_promos,
    walk_summary,
    start_walk,
    record_walk_progress,
    cancel_walk,
    ShopNotFoundError,
    InvalidShopRecordError,
    WalkSessionNotFoundError,
    InvalidWalkTransitionError,
)
from .services.catalog_ingestion import parse_menu_item, parse_voucher

UUID_PATTERN = '[0-9a-fA-F-]{36}'


class ShopPagination(PageNumberPagination):
    """Custom pagination for shops."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ShopViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for browsing the shop catalog.

    list: All shops by name (optional ?search= on name or location)
    retrieve: A shop with its menu items and vouchers
    """

    queryset = Shop.objects.prefetch_related('menu_items', 'vouchers')
    serializer_class = ShopSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = ShopPagination
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        query_serializer = ShopSearchQuerySerializer(data=self.request.query_params)
        query_serializer.is_valid(raise_exception=True)
        return search_shops(search=query_serializer.validated_data.get('search'))

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action in ('list', 'top_discounts', 'wallet_bank', 'food'):
            return ShopListSerializer
        return ShopSerializer

    @extend_schema(
        parameters=[OpenApiParameter('limit', OpenApiTypes.INT, description='Maximum number of shops')],
        responses={200: ShopListSerializer(many=True)},
    )
    @action(detail=False, methods=['get'], url_path='top-discounts')
    def top_discounts(self, request):
        """Shops with a promo, biggest saving first."""
        query_serializer = TopDiscountQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        shops = get_top_discount_shops(limit=query_serializer.validated_data.get('limit'))
        return Response(ShopListSerializer(shops, many=True).data)

    @extend_schema(responses={200: ShopListSerializer(many=True)})
    @action(detail=False, methods=['get'], url_path='wallet-bank')
    def wallet_bank(self, request):
        """Shops with e-wallet or bank promos."""
        return Response(ShopListSerializer(get_wallet_and_bank_shops(), many=True).data)

    @extend_schema(responses={200: ShopListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def food(self, request):
        """Shops with food promos."""
        return Response(ShopListSerializer(get_food_shops(), many=True).data)

    @extend_schema(responses={200: HomepageSectionsSerializer})
    @action(detail=False, methods=['get'])
    def sections(self, request):
        """Every homepage section at once."""
        return Response(HomepageSectionsSerializer(get_homepage_sections()).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('latitude', OpenApiTypes.FLOAT, description='User latitude'),
            OpenApiParameter('longitude', OpenApiTypes.FLOAT, description='User longitude'),
        ],
        responses={200: WalkMetricsSerializer, 400: ErrorSerializer},
    )
    @action(detail=True, methods=['get'], url_path='walk-metrics')
    def walk_metrics(self, request, pk=None):
        """Distance, steps and calories to reach a shop."""
        shop = self.get_object()

        query_serializer = UserLocationQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data

        user_location = None
        if 'latitude' in params:
            user_location = GeoPoint(latitude=params['latitude'], longitude=params['longitude'])

        return Response(WalkMetricsSerializer(walk_summary(shop, user_location)).data)

    @extend_schema(
        request=ShopIngestSerializer,
        responses={201: IngestionResultSerializer},
    )
    @action(detail=False, methods=['post'], permission_classes=[IsAdminUser])
    def ingest(self, request):
        """Ingest shop records from the seed feed format."""
        serializer = ShopIngestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ingest_shop_records(serializer.validated_data['shops'])
        output = IngestionResultSerializer({
            'created': result.created_count,
            'skipped': result.skipped,
            'errors': result.errors,
        })
        return Response(output.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=PromoRebuildSerializer,
        responses={200: ShopSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
    )
    @action(
        detail=True,
        methods=['post'],
        url_path='rebuild-promos',
        permission_classes=[IsAdminUser],
    )
    def rebuild_promos(self, request, pk=None):
        """Replace a shop's menu and vouchers and recompute its promos."""
        shop = self.get_object()
        serializer = PromoRebuildSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            menu_items = [parse_menu_item(entry) for entry in serializer.validated_data['menu']]
            vouchers = [parse_voucher(entry) for entry in serializer.validated_data['voucher']]
            shop = rebuild_shop_promos(shop_id=shop.id, menu_items=menu_items, vouchers=vouchers)
        except InvalidShopRecordError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )
        except ShopNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )

        shop = Shop.objects.prefetch_related('menu_items', 'vouchers').get(id=shop.id)
        return Response(ShopSerializer(shop).data)


class WalkSessionViewSet(
    mixins.RetrieveModelMixin,
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for walks toward a shop.

    create: Start a walk
    progress: Record steps and position
    cancel: Stop a walk before arrival
    """

    queryset = WalkSession.objects.select_related('shop')
    serializer_class = WalkSessionSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):
        """Filter walks by shop if specified."""
        queryset = super().get_queryset()

        if self.action != 'list':
            return queryset

        query_serializer = WalkListQuerySerializer(data=self.request.query_params)
        query_serializer.is_valid(raise_exception=True)
        shop_id = query_serializer.validated_data.get('shop')
        if shop_id:
            queryset = queryset.filter(shop_id=shop_id)

        return queryset

    @extend_schema(
        request=WalkStartSerializer,
        responses={201: WalkSessionSerializer, 404: ErrorSerializer},
    )
    def create(self, request, *args, **kwargs):
        """Start a walk toward a shop."""
        serializer = WalkStartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            session = start_walk(shop_id=serializer.validated_data['shop'])
        except ShopNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response(
            WalkSessionSerializer(session).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(
        request=WalkProgressSerializer,
        responses={200: WalkSessionSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
    )
    @action(detail=True, methods=['post'])
    def progress(self, request, pk=None):
        """Record cumulative steps and the current position."""
        session = self.get_object()
        serializer = WalkProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            session = record_walk_progress(
                session_id=session.id,
                steps=data['steps'],
                latitude=data.get('latitude'),
                longitude=data.get('longitude'),
            )
        except WalkSessionNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )
        except InvalidWalkTransitionError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(WalkSessionSerializer(session).data)

    @extend_schema(
        request=None,
        responses={200: WalkSessionSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
    )
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Stop a walk before arrival."""
        session = self.get_object()

        try:
            session = cancel_walk(session_id=session.id)
        except WalkSessionNotFoundError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_404_NOT_FOUND
            )
        except InvalidWalkTransitionError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(WalkSessionSerializer(session).data)
