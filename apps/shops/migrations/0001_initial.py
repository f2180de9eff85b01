# Generated manually for shops app

import uuid
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Shop',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200, unique=True)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('static_distance', models.PositiveIntegerField(default=0)),
                ('static_steps', models.PositiveIntegerField(default=0)),
                ('static_calories', models.PositiveIntegerField(default=0)),
                ('latitude', models.FloatField(default=0.0)),
                ('longitude', models.FloatField(default=0.0)),
                ('logo', models.CharField(blank=True, max_length=200)),
                ('header_image', models.CharField(blank=True, max_length=200)),
                ('aggregated_promo_tags', models.TextField(blank=True, default='', editable=False)),
                ('max_effective_discount_value', models.FloatField(default=0.0, editable=False)),
                ('best_promo_text', models.CharField(blank=True, editable=False, max_length=50, null=True)),
                ('active_promo_count', models.PositiveIntegerField(default=0, editable=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'shops',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['max_effective_discount_value'], name='shops_max_disc_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MenuItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('position', models.PositiveIntegerField(default=0)),
                ('name', models.CharField(max_length=200)),
                ('price', models.PositiveIntegerField()),
                ('discount_tag', models.CharField(blank=True, max_length=200)),
                ('discount_percentage', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('image', models.CharField(blank=True, max_length=200)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='menu_items', to='shops.shop')),
            ],
            options={
                'db_table': 'shop_menu_items',
                'ordering': ['position'],
                'indexes': [
                    models.Index(fields=['shop', 'position'], name='menu_items_shop_pos_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Voucher',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('position', models.PositiveIntegerField(default=0)),
                ('tag', models.CharField(blank=True, max_length=200)),
                ('max_discount_amount', models.PositiveIntegerField(default=0)),
                ('min_usage_amount', models.PositiveIntegerField(default=0)),
                ('image', models.CharField(blank=True, max_length=200)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vouchers', to='shops.shop')),
            ],
            options={
                'db_table': 'shop_vouchers',
                'ordering': ['position'],
                'indexes': [
                    models.Index(fields=['shop', 'position'], name='vouchers_shop_pos_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='WalkSession',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('active', 'Active'), ('arrived', 'Arrived'), ('cancelled', 'Cancelled')], default='active', max_length=20)),
                ('steps', models.PositiveIntegerField(default=0)),
                ('calories', models.FloatField(default=0.0)),
                ('remaining_distance', models.FloatField(blank=True, null=True)),
                ('last_latitude', models.FloatField(blank=True, null=True)),
                ('last_longitude', models.FloatField(blank=True, null=True)),
                ('started_at', models.DateTimeField(auto_now_add=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='walk_sessions', to='shops.shop')),
            ],
            options={
                'db_table': 'shop_walk_sessions',
                'ordering': ['-started_at'],
                'indexes': [
                    models.Index(fields=['shop', 'status'], name='walks_shop_status_idx'),
                ],
            },
        ),
    ]
