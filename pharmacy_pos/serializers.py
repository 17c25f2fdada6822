import re

_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')

# Largest values the stock and money columns hold
MAX_QUANTITY = 2147483647
MAX_RATE = 99999999.99
MAX_AMOUNT = 9999999999.99


def camel_to_snake(name):
    return _CAMEL_BOUNDARY.sub('_', name).lower()


def normalize_keys(data, field_names):
    """
    Map camelCase keys onto the declared snake_case field names.
    An explicit snake_case key always wins over its camelCase alias.
    """
    normalized = {}
    for key, value in data.items():
        if key in field_names:
            normalized[key] = value
            continue
        snake = camel_to_snake(key)
        if snake in field_names and snake not in data:
            normalized[snake] = value
        else:
            normalized[key] = value
    return normalized


class AliasedFieldsMixin:
    """Serializer mixin accepting camelCase spellings of its fields."""

    def to_internal_value(self, data):
        if hasattr(data, 'items'):
            data = normalize_keys(data, self.fields)
        return super().to_internal_value(data)
