"""
Django ORM implementation of the lease record store
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from .exceptions import ConcurrentModificationError
from .models import GeneratedLease as GeneratedLeaseModel
from .models import LeaseClause, LeaseTemplate, LeaseTemplateClause
from .records import (
    Clause,
    Condition,
    GeneratedClause,
    GeneratedLease,
    Template,
    TemplateClauseBinding,
    TemplateMetadata,
    TemplateVariable,
)
from .storage import CLAUSES, GENERATED_LEASES, TEMPLATES, LeaseStore

logger = logging.getLogger(__name__)


def _str_or_none(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


# --- model -> record ---

def clause_from_model(obj: LeaseClause) -> Clause:
    return Clause(
        id=str(obj.id),
        name=obj.name,
        title=obj.title,
        category=obj.category,
        content=obj.content,
        requirement=obj.requirement,
        summary=obj.summary,
        jurisdiction=obj.jurisdiction,
        jurisdiction_type=obj.jurisdiction_type,
        variables=list(obj.variables or []),
        dependencies=list(obj.dependencies or []),
        incompatible_with=list(obj.incompatible_with or []),
        effective_date=obj.effective_date,
        expiry_date=obj.expiry_date,
        legal_reference=obj.legal_reference,
        version=obj.version,
        is_active=obj.is_active,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
        revision=obj.revision,
    )


def template_from_model(obj: LeaseTemplate) -> Template:
    bindings = [
        TemplateClauseBinding(
            id=str(row.id),
            clause_id=str(row.clause_id),
            order=row.order,
            is_required=row.is_required,
            custom_content=row.custom_content,
            conditions=[Condition.from_dict(c) for c in (row.conditions or [])],
        )
        for row in obj.template_clauses.all()
    ]
    return Template(
        id=str(obj.id),
        name=obj.name,
        jurisdiction=obj.jurisdiction,
        property_type=obj.property_type,
        jurisdiction_type=obj.jurisdiction_type,
        description=obj.description,
        status=obj.status,
        version=obj.version,
        parent_version_id=_str_or_none(obj.parent_version_id),
        clauses=bindings,
        variables=[TemplateVariable.from_dict(v) for v in (obj.variables or [])],
        metadata=TemplateMetadata.from_dict(obj.metadata),
        created_by_id=obj.created_by_id,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
        published_at=obj.published_at,
        revision=obj.revision,
    )


def generated_lease_from_model(obj: GeneratedLeaseModel) -> GeneratedLease:
    return GeneratedLease(
        id=str(obj.id),
        template_id=str(obj.template_id),
        template_version=obj.template_version,
        variables=dict(obj.variables or {}),
        content=obj.content,
        clauses=[GeneratedClause(**c) for c in (obj.clauses or [])],
        status=obj.status,
        property_id=obj.property_id,
        unit_id=obj.unit_id,
        landlord_id=obj.landlord_id,
        tenant_ids=list(obj.tenant_ids or []),
        generated_at=obj.generated_at,
        expires_at=obj.expires_at,
        revision=obj.revision,
    )


# --- record -> model fields ---

def _clause_fields(record: Clause) -> Dict[str, Any]:
    return {
        'name': record.name,
        'title': record.title,
        'category': record.category,
        'content': record.content,
        'summary': record.summary,
        'jurisdiction': record.jurisdiction,
        'jurisdiction_type': record.jurisdiction_type,
        'requirement': record.requirement,
        'variables': list(record.variables),
        'dependencies': list(record.dependencies),
        'incompatible_with': list(record.incompatible_with),
        'effective_date': record.effective_date,
        'expiry_date': record.expiry_date,
        'legal_reference': record.legal_reference,
        'version': record.version,
        'is_active': record.is_active,
        'created_at': record.created_at or timezone.now(),
        'updated_at': record.updated_at or timezone.now(),
    }


def _template_fields(record: Template) -> Dict[str, Any]:
    return {
        'name': record.name,
        'description': record.description,
        'property_type': record.property_type or '',
        'jurisdiction': record.jurisdiction,
        'jurisdiction_type': record.jurisdiction_type,
        'status': record.status,
        'version': record.version,
        'parent_version_id': record.parent_version_id,
        'variables': [v.to_dict() for v in record.variables],
        'metadata': record.metadata.to_dict(),
        'created_by_id': record.created_by_id,
        'created_at': record.created_at or timezone.now(),
        'updated_at': record.updated_at or timezone.now(),
        'published_at': record.published_at,
    }


def _generated_lease_fields(record: GeneratedLease) -> Dict[str, Any]:
    return {
        'template_id': record.template_id,
        'template_version': record.template_version,
        'property_id': record.property_id,
        'unit_id': record.unit_id,
        'landlord_id': record.landlord_id,
        'tenant_ids': list(record.tenant_ids),
        'variables': dict(record.variables),
        'content': record.content,
        'clauses': [c.to_dict() for c in record.clauses],
        'status': record.status,
        'generated_at': record.generated_at or timezone.now(),
        'expires_at': record.expires_at,
    }


class DjangoLeaseStore(LeaseStore):
    """
    Store backed by lease_templates.models

    Revision checks are a conditional UPDATE inside transaction.atomic, so a
    write based on a stale read matches zero rows and is rejected.
    """

    MODELS = {
        CLAUSES: LeaseClause,
        TEMPLATES: LeaseTemplate,
        GENERATED_LEASES: GeneratedLeaseModel,
    }

    FIELD_BUILDERS = {
        CLAUSES: _clause_fields,
        TEMPLATES: _template_fields,
        GENERATED_LEASES: _generated_lease_fields,
    }

    def _queryset(self, kind: str):
        if kind == TEMPLATES:
            return LeaseTemplate.objects.prefetch_related('template_clauses')
        return self.MODELS[kind].objects.all()

    @staticmethod
    def _to_record(kind: str, obj):
        if kind == CLAUSES:
            return clause_from_model(obj)
        if kind == TEMPLATES:
            return template_from_model(obj)
        return generated_lease_from_model(obj)

    def _lookup(self, kind: str, record_id: str):
        try:
            return self._queryset(kind).filter(pk=record_id).first()
        except (DjangoValidationError, ValueError):
            # Not a UUID, so it cannot name a stored record
            return None

    def get(self, kind, record_id):
        self._check_kind(kind)
        obj = self._lookup(kind, record_id)
        return self._to_record(kind, obj) if obj is not None else None

    def put(self, kind, record, expected_revision=None):
        self._check_kind(kind)
        model = self.MODELS[kind]
        fields = self.FIELD_BUILDERS[kind](record)

        with transaction.atomic():
            if expected_revision is None:
                if self._lookup(kind, record.id) is not None:
                    raise ConcurrentModificationError(
                        f"{kind} record {record.id} already exists",
                        extra={'record_id': record.id},
                    )
                model.objects.create(id=record.id, revision=1, **fields)
            else:
                updated = model.objects.filter(
                    pk=record.id,
                    revision=expected_revision,
                ).update(revision=expected_revision + 1, **fields)
                if not updated:
                    logger.warning(
                        f"Stale write rejected for {kind} {record.id} "
                        f"at expected revision {expected_revision}"
                    )
                    raise ConcurrentModificationError(
                        f"{kind} record {record.id} was modified concurrently",
                        extra={'record_id': record.id},
                    )

            if kind == TEMPLATES:
                self._replace_bindings(record)

        return self.get(kind, record.id)

    def _replace_bindings(self, record: Template) -> None:
        LeaseTemplateClause.objects.filter(template_id=record.id).delete()
        LeaseTemplateClause.objects.bulk_create([
            LeaseTemplateClause(
                id=binding.id,
                template_id=record.id,
                clause_id=binding.clause_id,
                order=binding.order,
                position=position,
                is_required=binding.is_required,
                custom_content=binding.custom_content,
                conditions=[c.to_dict() for c in binding.conditions],
            )
            for position, binding in enumerate(record.clauses)
        ])

    def list(self, kind) -> List[Any]:
        self._check_kind(kind)
        return [self._to_record(kind, obj) for obj in self._queryset(kind)]
