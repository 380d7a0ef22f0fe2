from decimal import Decimal

from django.db import migrations

DEFAULT_TIERS = [
    ("Starter", 4900, 5, Decimal("20.00")),
    ("Pro", 14900, 15, Decimal("35.00")),
    ("Premium", 39900, 25, Decimal("50.00")),
]


def create_default_tiers(apps, schema_editor):
    HostingTier = apps.get_model("voting", "HostingTier")
    for name, price_cents, max_contestants, share in DEFAULT_TIERS:
        HostingTier.objects.get_or_create(
            name=name,
            defaults={
                "price_cents": price_cents,
                "max_contestants": max_contestants,
                "revenue_share_percent": share,
            },
        )


def remove_default_tiers(apps, schema_editor):
    HostingTier = apps.get_model("voting", "HostingTier")
    HostingTier.objects.filter(
        name__in=[name for name, *_ in DEFAULT_TIERS], competitions__isnull=True
    ).delete()


class Migration(migrations.Migration):

    dependencies = [
        ("voting", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_default_tiers, remove_default_tiers),
    ]
