# numbering/models.py
"""
Document numbering models.

Models:
- CounterDefinition: template and policies for one counter code (configuration)
- CounterComponent: one ordered piece of a definition's template (configuration)
- SequenceCounter: the stored counter value for one partition key (write model)

Definitions and components are maintained out-of-band and only read by the
numbering engine. SequenceCounter rows are created on first use of a key and
only ever moved forward by numbering.commands.next_counter.
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from numbering.choices import (
    ChronologicalControl,
    ComponentType,
    DefinitionLevel,
    RtzLevel,
    SequenceType,
)
from numbering.formatting import Component, CounterTemplate

MAX_COMPONENTS = 10


class CounterDefinition(models.Model):
    code = models.CharField(max_length=20, unique=True)
    description = models.CharField(max_length=100, blank=True, default="")
    sequence_type = models.PositiveSmallIntegerField(
        choices=SequenceType.choices,
        default=SequenceType.ALPHANUMERIC,
    )
    rtz_level = models.PositiveSmallIntegerField(
        choices=RtzLevel.choices,
        default=RtzLevel.NONE,
    )
    definition_level = models.PositiveSmallIntegerField(
        choices=DefinitionLevel.choices,
        default=DefinitionLevel.GLOBAL,
    )
    chronological_control = models.PositiveSmallIntegerField(
        choices=ChronologicalControl.choices,
        default=ChronologicalControl.NONE,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return self.code

    def template(self) -> CounterTemplate:
        """
        Build the immutable rendering template for this definition.

        Components are read in position order; use
        prefetch_related("components") to avoid a second query.
        """
        components = tuple(
            Component(
                component_type=c.component_type,
                length=c.length,
                constant=c.constant,
            )
            for c in sorted(self.components.all(), key=lambda c: c.position)
        )
        return CounterTemplate(
            components=components,
            sequence_type=self.sequence_type,
            chronological_control=self.chronological_control,
        )

    def clean(self):
        super().clean()
        if self.pk is None:
            return
        components = list(self.components.all())
        if len(components) > MAX_COMPONENTS:
            raise ValidationError(f"A counter has at most {MAX_COMPONENTS} components.")
        sequences = [c for c in components if c.component_type == ComponentType.SEQUENCE_NUMBER]
        if len(sequences) > 1:
            raise ValidationError("A counter has at most one sequence number component.")


class CounterComponent(models.Model):
    definition = models.ForeignKey(
        CounterDefinition,
        on_delete=models.CASCADE,
        related_name="components",
    )
    position = models.PositiveSmallIntegerField()
    component_type = models.PositiveSmallIntegerField(
        choices=ComponentType.choices,
        default=ComponentType.UNSET,
    )
    # Digit width, substring length or sub-format selector, depending on type.
    length = models.PositiveSmallIntegerField(default=0)
    constant = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        ordering = ["definition", "position"]
        constraints = [
            models.UniqueConstraint(
                fields=["definition", "position"],
                name="uniq_counter_component_position",
            ),
            models.CheckConstraint(
                condition=models.Q(position__gte=1) & models.Q(position__lte=MAX_COMPONENTS),
                name="counter_component_position_range",
            ),
        ]

    def __str__(self):
        return f"{self.definition_id}#{self.position}:{self.get_component_type_display()}"


class SequenceCounter(models.Model):
    """
    Stored counter value for one partition key.

    `next_value` is the value the next allocation hands out. A missing row
    behaves as next_value=1.
    """

    counter_code = models.CharField(max_length=20)
    scope = models.CharField(max_length=5, blank=True, default="")
    period = models.IntegerField(default=0)
    complement = models.CharField(max_length=20, blank=True, default="")
    next_value = models.BigIntegerField(default=1)
    single_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["counter_code", "scope", "period", "complement"],
                name="uniq_sequence_counter_key",
            ),
        ]

    def __str__(self):
        return f"{self.counter_code}[{self.scope}/{self.period}/{self.complement}]={self.next_value}"
