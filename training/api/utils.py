from datetime import date

from rest_framework.exceptions import ValidationError


def parse_query_date(request, name, default=None) -> date | None:
    value = request.query_params.get(name)
    if not value:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError({name: [f'Invalid date "{value}". Use YYYY-MM-DD.']})


def parse_query_int(request, name) -> int | None:
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: [f'Invalid integer "{value}".']})


def parse_query_bool(request, name, default=False) -> bool:
    value = request.query_params.get(name)
    if value is None or value == '':
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


def parse_date_range(request):
    date_from = parse_query_date(request, 'date_from')
    date_to = parse_query_date(request, 'date_to')
    if date_from and date_to and date_to < date_from:
        raise ValidationError({'date_to': ['End date cannot be before start date.']})
    return date_from, date_to
