"""
Serializer base classes.

The API speaks camelCase JSON while the models use snake_case, so the base
classes translate keys on the way in and out.  Foreign keys are exposed as
``<name>Id`` fields holding the related UUID, and free text is passed
through bleach before it is stored.
"""
from __future__ import annotations

import html
import re
from collections.abc import Mapping

import bleach
from rest_framework import serializers

_UPPER = re.compile(r'([A-Z])')

MAX_CLEAN_PASSES = 5


def camelize(key: str) -> str:
    head, *rest = key.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def underscore(key: str) -> str:
    return _UPPER.sub(lambda m: '_' + m.group(1).lower(), key)


def clean_text(value):
    """Strip markup from free text.

    Plain characters such as ``<``, ``>`` and ``&`` are kept as written, so
    "BP < 120" is stored unchanged.  Tags that only appear once entities
    are decoded are stripped on the next pass.
    """
    if value is None:
        return value
    text = str(value).strip()
    for _ in range(MAX_CLEAN_PASSES):
        cleaned = html.unescape(bleach.clean(text, tags=[], strip=True))
        if cleaned == text:
            return text
        text = cleaned
    return bleach.clean(text, tags=[], strip=True)


class CamelCaseMixin:
    """Translate keys between camelCase (wire) and snake_case (fields)."""

    # stored verbatim, never sanitised
    raw_fields = ('password',)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        return {camelize(key): value for key, value in data.items()}

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            data = {underscore(key): value for key, value in data.items()}
        return super().to_internal_value(data)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        for name, value in attrs.items():
            field = self.fields.get(name)
            if name in self.raw_fields:
                continue
            if (
                isinstance(value, str)
                and isinstance(field, serializers.CharField)
                and not isinstance(field, serializers.EmailField)
            ):
                attrs[name] = clean_text(value)
        return attrs


class CamelSerializer(CamelCaseMixin, serializers.Serializer):
    pass


class CamelModelSerializer(CamelCaseMixin, serializers.ModelSerializer):
    """Model serializer with camelCase keys and ``<relation>Id`` foreign keys."""

    def get_fields(self):
        fields = {}
        for name, field in super().get_fields().items():
            if isinstance(field, serializers.PrimaryKeyRelatedField) and field.source is None:
                field.source = name
                field.pk_field = serializers.UUIDField()
                name = f"{name}_id"
            fields[name] = field
        return fields
