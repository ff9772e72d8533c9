"""
Closed value sets shared by lease template records, models and serializers
"""
from django.db import models


class ClauseCategory(models.TextChoices):
    GENERAL = 'general', 'General'
    RENT = 'rent', 'Rent'
    SECURITY_DEPOSIT = 'security_deposit', 'Security Deposit'
    MAINTENANCE = 'maintenance', 'Maintenance'
    UTILITIES = 'utilities', 'Utilities'
    PETS = 'pets', 'Pets'
    PARKING = 'parking', 'Parking'
    TERMINATION = 'termination', 'Termination'
    RENEWAL = 'renewal', 'Renewal'
    RULES = 'rules', 'Rules'
    DISCLOSURE = 'disclosure', 'Disclosure'
    COMPLIANCE = 'compliance', 'Compliance'
    CUSTOM = 'custom', 'Custom'


class ClauseRequirement(models.TextChoices):
    REQUIRED = 'required', 'Required'
    OPTIONAL = 'optional', 'Optional'
    CONDITIONAL = 'conditional', 'Conditional'


class JurisdictionType(models.TextChoices):
    FEDERAL = 'federal', 'Federal'
    STATE = 'state', 'State'
    CITY = 'city', 'City'
    COUNTY = 'county', 'County'


class TemplateStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    ACTIVE = 'active', 'Active'
    ARCHIVED = 'archived', 'Archived'


class GeneratedLeaseStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PENDING_REVIEW = 'pending_review', 'Pending Review'
    PENDING_SIGNATURE = 'pending_signature', 'Pending Signature'
    SIGNED = 'signed', 'Signed'
    EXPIRED = 'expired', 'Expired'
    TERMINATED = 'terminated', 'Terminated'


class ConditionOperator(models.TextChoices):
    EQUALS = 'equals', 'Equals'
    NOT_EQUALS = 'not_equals', 'Not Equals'
    CONTAINS = 'contains', 'Contains'
    GREATER_THAN = 'greater_than', 'Greater Than'
    LESS_THAN = 'less_than', 'Less Than'
    IS_TRUE = 'is_true', 'Is True'
    IS_FALSE = 'is_false', 'Is False'


class VariableType(models.TextChoices):
    STRING = 'string', 'String'
    NUMBER = 'number', 'Number'
    DATE = 'date', 'Date'
    BOOLEAN = 'boolean', 'Boolean'
    CURRENCY = 'currency', 'Currency'
    ADDRESS = 'address', 'Address'
