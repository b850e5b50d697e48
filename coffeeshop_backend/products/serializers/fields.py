# products/serializers/fields.py

from rest_framework import serializers

from backend.encoding import as_bool, dump_json, safe_json_parse


class EncodedJSONField(serializers.Field):
    """
    JSON-in-a-text-column field.

    Output: parsed structure (empty dict/list when the cell is unreadable).
    Input: structure or stringified structure; stored as JSON text.
    """

    def __init__(self, *, shape=dict, **kwargs):
        self.shape = shape
        super().__init__(**kwargs)

    def to_representation(self, value):
        return safe_json_parse(value, self.shape())

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = safe_json_parse(data, None)
        if not isinstance(data, self.shape):
            raise serializers.ValidationError(
                f"Expected a {self.shape.__name__} (or its JSON text)."
            )
        return dump_json(data)


class TextFlagField(serializers.Field):
    """Flags arrive as booleans or text; only case-insensitive "true" is set."""

    def to_representation(self, value):
        return bool(value)

    def to_internal_value(self, data):
        return as_bool(data)
