"""Services for shops business logic."""

from .exceptions import (
    ShopsServiceError,
    ShopNotFoundError,
    DuplicateShopError,
    CatalogFileError,
    InvalidShopRecordError,
    WalkSessionNotFoundError,
    InvalidWalkTransitionError,
)
from .promo_evaluation import (
    BestPromo,
    PromoSummary,
    split_tags,
    aggregate_tags,
    serialize_tags,
    unique_active_promo_tags,
    active_promo_count,
    evaluate_best_promo,
    best_promo_text,
    max_effective_discount_value,
    compute_promo_summary,
)
from .shop_management import (
    create_shop,
    rebuild_shop_promos,
    refresh_promo_fields,
    get_shop_by_id,
    clear_catalog,
)
from .shop_ranking import (
    get_top_discount_shops,
    get_shops_with_tag,
    get_wallet_and_bank_shops,
    get_food_shops,
    search_shops,
    get_homepage_sections,
    promo_badge_label,
)
from .catalog_ingestion import (
    IngestionResult,
    parse_amount,
    parse_shop_record,
    ingest_shop_records,
    load_records,
    seed_catalog_if_empty,
)
from .walk_metrics import (
    walk_summary,
    format_eta,
)
from .walk_sessions import (
    start_walk,
    record_walk_progress,
    cancel_walk,
)

__all__ = [
    # Exceptions
    'ShopsServiceError',
    'ShopNotFoundError',
    'DuplicateShopError',
    'CatalogFileError',
    'InvalidShopRecordError',
    'WalkSessionNotFoundError',
    'InvalidWalkTransitionError',
    # Promo Evaluation
    'BestPromo',
    'PromoSummary',
    'split_tags',
    'aggregate_tags',
    'serialize_tags',
    'unique_active_promo_tags',
    'active_promo_count',
    'evaluate_best_promo',
    'best_promo_text',
    'max_effective_discount_value',
    'compute_promo_summary',
    # Shop Management
    'create_shop',
    'rebuild_shop_promos',
    'refresh_promo_fields',
    'get_shop_by_id',
    'clear_catalog',
    # Shop Ranking
    'get_top_discount_shops',
    'get_shops_with_tag',
    'get_wallet_and_bank_shops',
    'get_food_shops',
    'search_shops',
    'get_homepage_sections',
    'promo_badge_label',
    # Catalog Ingestion
    'IngestionResult',
    'parse_amount',
    'parse_shop_record',
    'ingest_shop_records',
    'load_records',
    'seed_catalog_if_empty',
    # Walk Metrics
    'walk_summary',
    'format_eta',
    # Walk Sessions
    'start_walk',
    'record_walk_progress',
    'cancel_walk',
]
