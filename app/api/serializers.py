# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Serializers validating config definitions and pseudonymization settings."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers


class StrictCharField(serializers.CharField):
    """CharField that rejects numbers instead of converting them to text."""

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('trim_whitespace', False)
        super().__init__(**kwargs)

    def to_internal_value(self, data: object) -> str:
        """Accept strings only."""
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class ClosedSerializer(serializers.Serializer):
    """Serializer that rejects keys it does not declare."""

    def to_internal_value(self, data: object) -> dict:
        """Reject unknown keys before validating the declared fields."""
        if isinstance(data, dict):
            unknown = sorted(set(data) - set(self.fields))

            if unknown:
                raise serializers.ValidationError({key: ['Unknown field.'] for key in unknown})

        return super().to_internal_value(data)


class DerivedFieldSerializer(ClosedSerializer):
    """A derived field joining the values of dot paths with a separator."""

    sources = serializers.ListField(child=StrictCharField())
    separator = StrictCharField()


class ConfigDefinitionSerializer(ClosedSerializer):
    """Uploaded config definition: ``{sources: [str], derived: {name: {sources: [str], separator: str}}}``."""

    sources = serializers.ListField(child=StrictCharField())
    derived = serializers.DictField(child=DerivedFieldSerializer())


def validate_config(data: object) -> bool:
    """Return True when the data is a valid config definition."""
    return ConfigDefinitionSerializer(data=data).is_valid()


class SettingsBlockSerializer(serializers.Serializer):
    """Settings of one file category."""

    checkedOptions = serializers.ListField(child=StrictCharField(), required=False)  # noqa: N815
    patterns = serializers.ListField(child=StrictCharField(), required=False)


class SettingsSerializer(serializers.Serializer):
    """Settings of a pseudonymization run, each category is optional."""

    logSettings = SettingsBlockSerializer(required=False)  # noqa: N815
    jsonSettings = SettingsBlockSerializer(required=False)  # noqa: N815
    xmlSettings = SettingsBlockSerializer(required=False)  # noqa: N815
    regexSettings = SettingsBlockSerializer(required=False)  # noqa: N815
