"""
Lease clause, template and generated lease models
"""
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
import uuid

from .choices import (
    ClauseCategory,
    ClauseRequirement,
    GeneratedLeaseStatus,
    JurisdictionType,
    TemplateStatus,
)


class LeaseClause(models.Model):
    """
    Reusable lease clause. Edited in place (version bump), never deleted.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text='Machine name (e.g. rent_payment)')
    title = models.CharField(max_length=255, help_text='Heading used in generated leases')
    category = models.CharField(max_length=32, choices=ClauseCategory.choices)
    content = models.TextField(help_text='Clause text with {{variable}} placeholders')
    summary = models.TextField(blank=True, null=True)
    jurisdiction = models.CharField(max_length=100, blank=True, null=True, help_text='Null means universal')
    jurisdiction_type = models.CharField(max_length=20, choices=JurisdictionType.choices, blank=True, null=True)
    requirement = models.CharField(
        max_length=20,
        choices=ClauseRequirement.choices,
        default=ClauseRequirement.OPTIONAL,
    )
    variables = models.JSONField(default=list, help_text='Declared placeholder names')
    dependencies = models.JSONField(default=list, help_text='Clause IDs expected alongside this one')
    incompatible_with = models.JSONField(default=list, help_text='Clause IDs that must not be bound with this one')
    effective_date = models.DateTimeField(blank=True, null=True)
    expiry_date = models.DateTimeField(blank=True, null=True)
    legal_reference = models.CharField(max_length=255, blank=True, null=True)
    version = models.IntegerField(default=1, help_text='Content version number')
    is_active = models.BooleanField(default=True)
    revision = models.IntegerField(default=1, help_text='Optimistic concurrency counter')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'lease_clauses'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['category'], name='lease_clause_category_idx'),
            models.Index(fields=['requirement', 'is_active'], name='lease_clause_req_active_idx'),
        ]

    def __str__(self):
        return f"{self.name} v{self.version}"


class LeaseTemplate(models.Model):
    """
    Ordered composition of clause bindings plus declared variables
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    property_type = models.CharField(max_length=100, blank=True, default='')
    jurisdiction = models.CharField(max_length=100)
    jurisdiction_type = models.CharField(max_length=20, choices=JurisdictionType.choices, blank=True, null=True)
    status = models.CharField(max_length=20, choices=TemplateStatus.choices, default=TemplateStatus.DRAFT)
    version = models.IntegerField(default=1)
    parent_version_id = models.UUIDField(blank=True, null=True, help_text='Template this one was cloned from')
    variables = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    metadata = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    created_by_id = models.CharField(max_length=64, blank=True, null=True)
    revision = models.IntegerField(default=1, help_text='Optimistic concurrency counter')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)
    published_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'lease_templates'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['jurisdiction', 'status'], name='lease_tmpl_juris_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} v{self.version} ({self.status})"


class LeaseTemplateClause(models.Model):
    """
    Binding of a clause into a template (order, override, conditions)
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    template = models.ForeignKey(
        LeaseTemplate,
        on_delete=models.CASCADE,
        related_name='template_clauses',
    )
    clause = models.ForeignKey(
        LeaseClause,
        on_delete=models.PROTECT,
        related_name='template_bindings',
    )
    order = models.IntegerField(default=0)
    position = models.IntegerField(default=0, help_text='Insertion sequence, breaks ties on order')
    is_required = models.BooleanField(default=False)
    custom_content = models.TextField(blank=True, null=True)
    conditions = models.JSONField(default=list)

    class Meta:
        db_table = 'lease_template_clauses'
        ordering = ['position']
        indexes = [
            models.Index(fields=['template', 'order'], name='lease_binding_tmpl_order_idx'),
        ]

    def __str__(self):
        return f"{self.clause_id} @ {self.order} in {self.template_id}"


class GeneratedLease(models.Model):
    """
    Immutable lease document produced from an active template
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    template = models.ForeignKey(
        LeaseTemplate,
        on_delete=models.PROTECT,
        related_name='generated_leases',
    )
    template_version = models.IntegerField(help_text='Template version at generation time')
    property_id = models.CharField(max_length=64, blank=True, null=True)
    unit_id = models.CharField(max_length=64, blank=True, null=True)
    landlord_id = models.CharField(max_length=64, blank=True, null=True)
    tenant_ids = models.JSONField(default=list)
    variables = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    content = models.TextField()
    clauses = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    status = models.CharField(
        max_length=20,
        choices=GeneratedLeaseStatus.choices,
        default=GeneratedLeaseStatus.DRAFT,
    )
    revision = models.IntegerField(default=1)
    generated_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'generated_leases'
        ordering = ['generated_at']
        indexes = [
            models.Index(fields=['template', 'status'], name='gen_lease_tmpl_status_idx'),
            models.Index(fields=['property_id'], name='gen_lease_property_idx'),
        ]

    def __str__(self):
        return f"Lease {self.id} ({self.status})"
