"""
Plain data records handed between the lease template services and the store.

Templates reference clauses by id only; clause text is looked up from the
library when a lease is generated, so library edits reach later generations.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from .choices import (
    ClauseRequirement,
    ConditionOperator,
    GeneratedLeaseStatus,
    TemplateStatus,
    VariableType,
)
from .exceptions import ValidationError


def _serialize(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


class Record:
    """Mixin giving dataclass records a plain-dict form."""

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(dataclasses.asdict(self))


@dataclass
class Condition(Record):
    field: str
    operator: ConditionOperator
    value: Any = None

    def __post_init__(self):
        try:
            self.operator = ConditionOperator(self.operator)
        except ValueError:
            raise ValidationError(
                f"Unknown condition operator: {self.operator!r}",
                fields=['operator'],
            ) from None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Condition':
        return cls(field=data['field'], operator=data['operator'], value=data.get('value'))


@dataclass
class VariableValidation(Record):
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    options: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['VariableValidation']:
        if not data:
            return None
        return cls(
            min=data.get('min'),
            max=data.get('max'),
            pattern=data.get('pattern'),
            options=list(data['options']) if data.get('options') is not None else None,
        )


@dataclass
class TemplateVariable(Record):
    name: str
    type: VariableType = VariableType.STRING
    label: str = ''
    description: Optional[str] = None
    required: bool = True
    default_value: Any = None
    validation: Optional[VariableValidation] = None

    def __post_init__(self):
        try:
            self.type = VariableType(self.type)
        except ValueError:
            raise ValidationError(
                f"Unknown variable type for {self.name!r}: {self.type!r}",
                fields=[self.name],
            ) from None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TemplateVariable':
        return cls(
            name=data['name'],
            type=data.get('type', VariableType.STRING),
            label=data.get('label') or '',
            description=data.get('description'),
            required=data.get('required', True),
            default_value=data.get('default_value'),
            validation=VariableValidation.from_dict(data.get('validation')),
        )


@dataclass
class TemplateMetadata(Record):
    estimated_pages: int = 5
    required_signatures: int = 2
    notarization_required: bool = False
    witness_required: bool = False
    last_legal_review: Optional[datetime] = None
    compliance_notes: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TemplateMetadata':
        data = data or {}
        return cls(
            estimated_pages=data.get('estimated_pages') or 5,
            required_signatures=data.get('required_signatures') or 2,
            notarization_required=bool(data.get('notarization_required', False)),
            witness_required=bool(data.get('witness_required', False)),
            last_legal_review=data.get('last_legal_review'),
            compliance_notes=list(data.get('compliance_notes') or []),
        )


@dataclass
class TemplateClauseBinding(Record):
    """A clause's inclusion record within one template."""
    id: str
    clause_id: str
    order: int
    is_required: bool = False
    custom_content: Optional[str] = None
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class Clause(Record):
    id: str
    name: str
    title: str
    category: str
    content: str
    requirement: ClauseRequirement = ClauseRequirement.OPTIONAL
    summary: Optional[str] = None
    jurisdiction: Optional[str] = None
    jurisdiction_type: Optional[str] = None
    variables: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    incompatible_with: List[str] = field(default_factory=list)
    effective_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    legal_reference: Optional[str] = None
    version: int = 1
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    revision: int = 0


@dataclass
class Template(Record):
    id: str
    name: str
    jurisdiction: str
    property_type: str = ''
    jurisdiction_type: Optional[str] = None
    description: Optional[str] = None
    status: TemplateStatus = TemplateStatus.DRAFT
    version: int = 1
    parent_version_id: Optional[str] = None
    clauses: List[TemplateClauseBinding] = field(default_factory=list)
    variables: List[TemplateVariable] = field(default_factory=list)
    metadata: TemplateMetadata = field(default_factory=TemplateMetadata)
    created_by_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    revision: int = 0

    def bound_clause_ids(self) -> List[str]:
        return [binding.clause_id for binding in self.clauses]

    def ordered_bindings(self) -> List[TemplateClauseBinding]:
        # sorted() is stable, so equal orders keep insertion sequence
        return sorted(self.clauses, key=lambda binding: binding.order)

    def find_binding(self, clause_id: str) -> Optional[TemplateClauseBinding]:
        for binding in self.ordered_bindings():
            if binding.clause_id == clause_id:
                return binding
        return None


@dataclass
class GeneratedClause(Record):
    clause_id: str
    title: str
    content: str
    order: int


@dataclass
class GeneratedLease(Record):
    """Immutable snapshot produced by one generation call."""
    id: str
    template_id: str
    template_version: int
    variables: Dict[str, Any]
    content: str
    clauses: List[GeneratedClause] = field(default_factory=list)
    status: GeneratedLeaseStatus = GeneratedLeaseStatus.DRAFT
    property_id: Optional[str] = None
    unit_id: Optional[str] = None
    landlord_id: Optional[str] = None
    tenant_ids: List[str] = field(default_factory=list)
    generated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    revision: int = 0
