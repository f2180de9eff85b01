"""
Management command to seed the shop catalog from a JSON feed.

Usage:
    python manage.py seed_shops
    python manage.py seed_shops --file path/to/shops.json
    python manage.py seed_shops --clear

Without --clear or --force the catalog is only seeded when it is empty.
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.shops.services import (
    CatalogFileError,
    clear_catalog,
    ingest_shop_records,
    load_records,
    seed_catalog_if_empty,
)


class Command(BaseCommand):
    help = 'Seed the coffee shop catalog from a JSON feed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--file',
            default=None,
            help='Path to the JSON feed (defaults to SHOPS_SEED_FILE)',
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing shops before seeding',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Ingest even when the catalog already has shops',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        path = options['file'] or settings.SHOPS_SEED_FILE

        if options['clear']:
            self.stdout.write('Clearing existing shops...')
            removed = clear_catalog()
            self.stdout.write(f'  Removed {removed} shops')

        self.stdout.write(f'Seeding shops from {path}...')

        try:
            if options['force']:
                result = ingest_shop_records(load_records(path))
            else:
                result = seed_catalog_if_empty(path)
        except CatalogFileError as e:
            raise CommandError(str(e))

        if result is None:
            self.stdout.write(self.style.WARNING(
                'Catalog already has shops, nothing seeded (use --clear or --force)'
            ))
            return

        for shop in result.created:
            self.stdout.write(
                f'  {shop.name}: {shop.best_promo_text or "no promo"} '
                f"(tags: '{shop.aggregated_promo_tags}')"
            )
        for name in result.skipped:
            self.stdout.write(self.style.WARNING(f'  Skipped duplicate: {name}'))
        for error in result.errors:
            self.stdout.write(self.style.WARNING(f"  Invalid record #{error['index']}: {error['error']}"))

        self.stdout.write(self.style.SUCCESS(f'Seeded {result.created_count} shops'))
