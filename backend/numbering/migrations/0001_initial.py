import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CounterDefinition",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True)),
                ("description", models.CharField(blank=True, default="", max_length=100)),
                ("sequence_type", models.PositiveSmallIntegerField(choices=[(1, "Alphanumeric"), (2, "Numeric")], default=1)),
                ("rtz_level", models.PositiveSmallIntegerField(choices=[(1, "No reset"), (2, "Annual"), (3, "Monthly"), (4, "Fiscal year"), (5, "Period"), (99, "Decennial")], default=1)),
                ("definition_level", models.PositiveSmallIntegerField(choices=[(1, "Global"), (2, "Legal entity"), (3, "Site")], default=1)),
                ("chronological_control", models.PositiveSmallIntegerField(choices=[(1, "None"), (2, "Controlled")], default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="CounterComponent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveSmallIntegerField()),
                ("component_type", models.PositiveSmallIntegerField(choices=[(0, "Unset"), (1, "Constant"), (2, "Year"), (3, "Month"), (4, "Week"), (5, "Day"), (6, "Company"), (7, "Site"), (8, "Sequence number"), (9, "Complement"), (10, "Fiscal year"), (11, "Period"), (12, "Formula")], default=0)),
                ("length", models.PositiveSmallIntegerField(default=0)),
                ("constant", models.CharField(blank=True, default="", max_length=20)),
                ("definition", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="components", to="numbering.counterdefinition")),
            ],
            options={
                "ordering": ["definition", "position"],
            },
        ),
        migrations.CreateModel(
            name="SequenceCounter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("counter_code", models.CharField(max_length=20)),
                ("scope", models.CharField(blank=True, default="", max_length=5)),
                ("period", models.IntegerField(default=0)),
                ("complement", models.CharField(blank=True, default="", max_length=20)),
                ("next_value", models.BigIntegerField(default=1)),
                ("single_id", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.AddConstraint(
            model_name="countercomponent",
            constraint=models.UniqueConstraint(fields=("definition", "position"), name="uniq_counter_component_position"),
        ),
        migrations.AddConstraint(
            model_name="countercomponent",
            constraint=models.CheckConstraint(condition=models.Q(("position__gte", 1), ("position__lte", 10)), name="counter_component_position_range"),
        ),
        migrations.AddConstraint(
            model_name="sequencecounter",
            constraint=models.UniqueConstraint(fields=("counter_code", "scope", "period", "complement"), name="uniq_sequence_counter_key"),
        ),
    ]
