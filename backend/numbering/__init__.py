"""
Numbering app - formatted, gap-free document numbers.

This app provides:
- CounterDefinition / CounterComponent: declarative number templates
- SequenceCounter: per (code, scope, period, complement) counter rows
- next_counter: allocate and render the next document number

Usage:
    from numbering.commands import next_counter

    with transaction.atomic():
        number = next_counter("VENDA_NF", company="ACME", site="LIS01", date=doc_date)
        SalesInvoice.objects.create(number=number, ...)
"""
