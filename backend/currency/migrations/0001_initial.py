import datetime
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Currency",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=3, unique=True)),
                ("name", models.CharField(blank=True, default="", max_length=50)),
                ("pivot_flag", models.PositiveSmallIntegerField(choices=[(0, "Excluded from conversion"), (1, "Floating against pivot"), (2, "Fixed legacy rate")], default=1)),
                ("legacy_rate", models.DecimalField(decimal_places=10, default=Decimal("0"), max_digits=20)),
                ("changeover_date", models.DateField(default=datetime.date(1753, 1, 1))),
            ],
            options={
                "verbose_name_plural": "Currencies",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="CurrencyRate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rate_type", models.PositiveSmallIntegerField(choices=[(1, "Daily rate"), (2, "Monthly rate"), (3, "Average rate"), (4, "Customs document rate")], default=1)),
                ("source_currency", models.CharField(max_length=3)),
                ("destination_currency", models.CharField(max_length=3)),
                ("rate_date", models.DateField()),
                ("inverse_rate", models.DecimalField(decimal_places=12, max_digits=24)),
                ("divisor", models.DecimalField(decimal_places=6, default=Decimal("1"), max_digits=20)),
            ],
            options={
                "ordering": ["rate_type", "source_currency", "destination_currency", "-rate_date"],
            },
        ),
        migrations.AddConstraint(
            model_name="currencyrate",
            constraint=models.UniqueConstraint(fields=("rate_type", "source_currency", "destination_currency", "rate_date"), name="uniq_currency_rate_observation"),
        ),
        migrations.AddIndex(
            model_name="currencyrate",
            index=models.Index(fields=["rate_type", "source_currency", "destination_currency", "-rate_date"], name="currency_rate_lookup_idx"),
        ),
    ]
