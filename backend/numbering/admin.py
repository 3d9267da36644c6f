# numbering/admin.py
"""
Django admin configuration for numbering models.

Counter definitions are configuration and fully editable. Sequence
counters are write models owned by numbering.commands: visible, with the
value field locked.
"""

from django.contrib import admin

from .models import CounterComponent, CounterDefinition, SequenceCounter


class CounterComponentInline(admin.TabularInline):
    model = CounterComponent
    extra = 0
    max_num = 10
    fields = ["position", "component_type", "length", "constant"]
    ordering = ["position"]


@admin.register(CounterDefinition)
class CounterDefinitionAdmin(admin.ModelAdmin):
    list_display = [
        "code",
        "description",
        "sequence_type",
        "rtz_level",
        "definition_level",
        "chronological_control",
    ]
    list_filter = ["sequence_type", "rtz_level", "definition_level"]
    search_fields = ["code", "description"]
    inlines = [CounterComponentInline]


@admin.register(SequenceCounter)
class SequenceCounterAdmin(admin.ModelAdmin):
    list_display = ["counter_code", "scope", "period", "complement", "next_value", "updated_at"]
    list_filter = ["counter_code"]
    search_fields = ["counter_code", "scope", "complement"]
    readonly_fields = ["next_value", "single_id", "created_at", "updated_at"]

    def has_add_permission(self, request):
        return False
