"""
Payload validation for lease template operations
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Type

from rest_framework import serializers

from .choices import (
    ClauseCategory,
    ClauseRequirement,
    ConditionOperator,
    JurisdictionType,
    VariableType,
)
from .exceptions import ValidationError


def validate_payload(
    serializer_class: Type[serializers.Serializer],
    payload: Mapping[str, Any],
    partial: bool = False,
) -> Dict[str, Any]:
    """Run a serializer and raise ValidationError naming the bad fields."""
    if not isinstance(payload, Mapping):
        raise ValidationError('Payload must be an object')

    serializer = serializer_class(data=dict(payload), partial=partial)
    if not serializer.is_valid():
        errors = serializer.errors
        fields = sorted(errors.keys())
        raise ValidationError(
            f"Invalid {serializer_class.__name__.replace('Serializer', '')} payload: {', '.join(fields)}",
            fields=fields,
            extra={'errors': errors},
        )
    return dict(serializer.validated_data)


class ScalarField(serializers.Field):
    """Accepts a string, number or boolean as-is."""

    default_error_messages = {
        'invalid': 'Must be a string, number or boolean.',
    }

    def to_internal_value(self, data):
        if isinstance(data, (str, int, float, bool)):
            return data
        self.fail('invalid')

    def to_representation(self, value):
        return value


class ConditionSerializer(serializers.Serializer):
    field = serializers.CharField(min_length=1)
    operator = serializers.ChoiceField(choices=ConditionOperator.choices)
    value = ScalarField(required=False, allow_null=True)


class VariableValidationSerializer(serializers.Serializer):
    min = serializers.FloatField(required=False)
    max = serializers.FloatField(required=False)
    pattern = serializers.CharField(required=False)
    options = serializers.ListField(child=serializers.CharField(), required=False)

    def validate_pattern(self, value):
        try:
            re.compile(value)
        except re.error as exc:
            raise serializers.ValidationError(f"Invalid regular expression: {exc}")
        return value


class TemplateVariableSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1)
    type = serializers.ChoiceField(choices=VariableType.choices)
    label = serializers.CharField(min_length=1)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    required = serializers.BooleanField(default=True)
    default_value = ScalarField(required=False, allow_null=True)
    validation = VariableValidationSerializer(required=False, allow_null=True)


class TemplateMetadataSerializer(serializers.Serializer):
    estimated_pages = serializers.IntegerField(min_value=1, required=False)
    required_signatures = serializers.IntegerField(min_value=1, required=False)
    notarization_required = serializers.BooleanField(required=False)
    witness_required = serializers.BooleanField(required=False)
    compliance_notes = serializers.ListField(child=serializers.CharField(), required=False)


class ClauseCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    title = serializers.CharField(min_length=1, max_length=255)
    category = serializers.ChoiceField(choices=ClauseCategory.choices)
    content = serializers.CharField(min_length=1, trim_whitespace=False)
    summary = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    jurisdiction = serializers.CharField(required=False, allow_null=True, max_length=100)
    jurisdiction_type = serializers.ChoiceField(choices=JurisdictionType.choices, required=False, allow_null=True)
    requirement = serializers.ChoiceField(choices=ClauseRequirement.choices, default=ClauseRequirement.OPTIONAL)
    variables = serializers.ListField(child=serializers.CharField(), required=False)
    dependencies = serializers.ListField(child=serializers.CharField(), required=False)
    incompatible_with = serializers.ListField(child=serializers.CharField(), required=False)
    effective_date = serializers.DateTimeField(required=False, allow_null=True)
    expiry_date = serializers.DateTimeField(required=False, allow_null=True)
    legal_reference = serializers.CharField(required=False, allow_null=True, max_length=255)


class ClauseUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255, required=False)
    title = serializers.CharField(min_length=1, max_length=255, required=False)
    category = serializers.ChoiceField(choices=ClauseCategory.choices, required=False)
    content = serializers.CharField(min_length=1, trim_whitespace=False, required=False)
    summary = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    requirement = serializers.ChoiceField(choices=ClauseRequirement.choices, required=False)
    variables = serializers.ListField(child=serializers.CharField(), required=False)
    dependencies = serializers.ListField(child=serializers.CharField(), required=False)
    incompatible_with = serializers.ListField(child=serializers.CharField(), required=False)
    legal_reference = serializers.CharField(required=False, allow_null=True, max_length=255)
    is_active = serializers.BooleanField(required=False)


class TemplateCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    property_type = serializers.CharField(min_length=1, max_length=100)
    jurisdiction = serializers.CharField(min_length=1, max_length=100)
    jurisdiction_type = serializers.ChoiceField(choices=JurisdictionType.choices)
    clause_ids = serializers.ListField(child=serializers.CharField(), required=False)
    variables = TemplateVariableSerializer(many=True, required=False)
    metadata = TemplateMetadataSerializer(required=False)
    created_by_id = serializers.CharField(required=False, allow_null=True, max_length=64)

    def validate_variables(self, value):
        names = [v['name'] for v in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise serializers.ValidationError(f"Duplicate variable names: {', '.join(duplicates)}")
        return value


class TemplateUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=255, required=False)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    variables = TemplateVariableSerializer(many=True, required=False)
    metadata = TemplateMetadataSerializer(required=False)

    validate_variables = TemplateCreateSerializer.validate_variables


class AttachClauseSerializer(serializers.Serializer):
    clause_id = serializers.CharField(min_length=1)
    order = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    is_required = serializers.BooleanField(default=False)
    custom_content = serializers.CharField(required=False, allow_null=True, trim_whitespace=False)
    conditions = ConditionSerializer(many=True, required=False)
