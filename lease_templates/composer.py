"""
Template composer: clause bindings, lifecycle and version lineage
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Iterable, List, Mapping, Optional

from django.utils import timezone

from .choices import ClauseRequirement, TemplateStatus
from .conditions import as_condition
from .exceptions import ConflictError, NotFound, PreconditionFailed
from .records import (
    Clause,
    Condition,
    Template,
    TemplateClauseBinding,
    TemplateMetadata,
    TemplateVariable,
)
from .serializers import (
    AttachClauseSerializer,
    TemplateCreateSerializer,
    TemplateUpdateSerializer,
    validate_payload,
)
from .storage import CLAUSES, TEMPLATES, LeaseStore

logger = logging.getLogger(__name__)


class TemplateComposerService:
    """
    Build lease templates out of library clauses.

    Lifecycle: draft -> active (publish), draft|active -> archived (archive).
    Archived templates are read-only. Every write passes the revision that was
    read, so two callers editing the same template cannot silently overwrite
    each other; the second one gets ConcurrentModificationError.
    """

    def __init__(self, store: LeaseStore):
        self.store = store

    # --- reads ---

    def get_template(self, template_id: str) -> Template:
        template = self.store.get(TEMPLATES, template_id)
        if template is None:
            raise NotFound(f"Template {template_id} not found", extra={'template_id': template_id})
        return template

    def list_templates(
        self,
        jurisdiction: Optional[str] = None,
        property_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Template]:
        results = [
            template for template in self.store.list(TEMPLATES)
            if (not jurisdiction or template.jurisdiction == jurisdiction)
            and (not property_type or template.property_type == property_type)
            and (not status or template.status == status)
        ]
        results.sort(key=lambda t: t.updated_at or timezone.now(), reverse=True)
        return results

    # --- writes ---

    def create_template(self, payload: Mapping[str, Any]) -> Template:
        """
        Create a draft template

        Args:
            payload: name, property_type, jurisdiction, jurisdiction_type and
                optional description, variables, metadata, clause_ids,
                created_by_id

        Returns:
            The stored Template. Clauses named in ``clause_ids`` are bound in
            sequence with orders 0, 1, 2... under the same incompatibility
            check as ``attach_clause``.
        """
        data = validate_payload(TemplateCreateSerializer, payload)
        now = timezone.now()
        template = Template(
            id=str(uuid.uuid4()),
            name=data['name'],
            description=data.get('description'),
            property_type=data['property_type'],
            jurisdiction=data['jurisdiction'],
            jurisdiction_type=data['jurisdiction_type'],
            status=TemplateStatus.DRAFT,
            version=1,
            variables=[TemplateVariable.from_dict(v) for v in data.get('variables') or []],
            metadata=TemplateMetadata.from_dict(data.get('metadata')),
            created_by_id=data.get('created_by_id'),
            created_at=now,
            updated_at=now,
        )

        for clause_id in data.get('clause_ids') or []:
            clause = self._get_clause(clause_id)
            self._check_compatible(template, clause)
            template.clauses.append(
                TemplateClauseBinding(
                    id=str(uuid.uuid4()),
                    clause_id=clause.id,
                    order=self._next_order(template),
                )
            )

        stored = self.store.put(TEMPLATES, template)
        logger.info(f"Created template {stored.id} ({stored.name}) with {len(stored.clauses)} clauses")
        return stored

    def update_template(self, template_id: str, partial: Mapping[str, Any]) -> Template:
        """Change name, description, metadata or variable declarations."""
        template = self._get_mutable(template_id)
        data = validate_payload(TemplateUpdateSerializer, partial, partial=True)

        if 'name' in data:
            template.name = data['name']
        if 'description' in data:
            template.description = data['description']
        if 'variables' in data:
            template.variables = [TemplateVariable.from_dict(v) for v in data['variables']]
        if 'metadata' in data:
            merged = template.metadata.to_dict()
            merged.update(data['metadata'])
            template.metadata = TemplateMetadata.from_dict(merged)

        return self._save(template, f"Updated template {template.id}")

    def attach_clause(
        self,
        template_id: str,
        clause_id: str,
        order: Optional[int] = None,
        is_required: bool = False,
        custom_content: Optional[str] = None,
        conditions: Optional[Iterable[Any]] = None,
    ) -> TemplateClauseBinding:
        """
        Bind a library clause into a template.

        Only the incoming clause's ``incompatible_with`` list is checked
        against what is already bound; a bound clause that lists the incoming
        one is not consulted.

        Raises:
            NotFound: template or clause does not exist
            ConflictError: the clause is incompatible with a bound clause
            PreconditionFailed: the template is archived
        """
        data = validate_payload(AttachClauseSerializer, {
            'clause_id': clause_id,
            'order': order,
            'is_required': is_required,
            'custom_content': custom_content,
            'conditions': [c.to_dict() if isinstance(c, Condition) else c for c in conditions or []],
        })

        template = self._get_mutable(template_id)
        clause = self._get_clause(clause_id)
        self._check_compatible(template, clause)

        binding = TemplateClauseBinding(
            id=str(uuid.uuid4()),
            clause_id=clause.id,
            order=data['order'] if data.get('order') is not None else self._next_order(template),
            is_required=data['is_required'],
            custom_content=data.get('custom_content'),
            conditions=[as_condition(c) for c in data.get('conditions') or []],
        )
        template.clauses.append(binding)
        template.clauses = template.ordered_bindings()

        self._save(template, f"Attached clause {clause.id} to template {template.id} at order {binding.order}")
        return binding

    def detach_clause(self, template_id: str, clause_id: str) -> Template:
        template = self._get_mutable(template_id)
        binding = template.find_binding(clause_id)
        if binding is None:
            raise NotFound(
                f"Clause {clause_id} is not bound to template {template_id}",
                extra={'template_id': template_id, 'clause_id': clause_id},
            )
        template.clauses = [b for b in template.clauses if b.id != binding.id]
        return self._save(template, f"Detached clause {clause_id} from template {template.id}")

    def publish(self, template_id: str) -> Template:
        """
        Make a template active.

        Every active library clause marked required must be bound. The check
        runs here only; clauses marked required after publication do not
        affect already-active templates.
        """
        template = self._get_mutable(template_id)
        missing = self.missing_required_clauses(template)
        if missing:
            names = [clause.name for clause in missing]
            logger.warning(f"Publish rejected for template {template.id}: missing {', '.join(names)}")
            raise PreconditionFailed(
                f"Missing required clauses: {', '.join(names)}",
                fields=names,
                extra={
                    'missing_clauses': [
                        {'id': clause.id, 'name': clause.name, 'title': clause.title}
                        for clause in missing
                    ],
                },
            )

        now = timezone.now()
        template.status = TemplateStatus.ACTIVE
        template.published_at = now
        return self._save(template, f"Published template {template.id}", now=now)

    def archive(self, template_id: str) -> Template:
        template = self._get_mutable(template_id)
        template.status = TemplateStatus.ARCHIVED
        return self._save(template, f"Archived template {template.id}")

    def clone(
        self,
        template_id: str,
        new_name: Optional[str] = None,
        created_by_id: Optional[str] = None,
    ) -> Template:
        """
        Copy a template into a new draft.

        The copy starts its own lineage at version 1 and records the source in
        ``parent_version_id``. Bindings are duplicated with fresh binding ids
        and the same clause ids.
        """
        source = self.get_template(template_id)
        now = timezone.now()
        cloned = Template(
            id=str(uuid.uuid4()),
            name=new_name or f"{source.name} (Copy)",
            description=source.description,
            property_type=source.property_type,
            jurisdiction=source.jurisdiction,
            jurisdiction_type=source.jurisdiction_type,
            status=TemplateStatus.DRAFT,
            version=1,
            parent_version_id=source.id,
            clauses=[
                TemplateClauseBinding(
                    id=str(uuid.uuid4()),
                    clause_id=binding.clause_id,
                    order=binding.order,
                    is_required=binding.is_required,
                    custom_content=binding.custom_content,
                    conditions=list(binding.conditions),
                )
                for binding in source.clauses
            ],
            variables=list(source.variables),
            metadata=source.metadata,
            created_by_id=created_by_id,
            created_at=now,
            updated_at=now,
        )
        stored = self.store.put(TEMPLATES, cloned)
        logger.info(f"Cloned template {source.id} into {stored.id}")
        return stored

    def missing_required_clauses(self, template: Template) -> List[Clause]:
        bound = set(template.bound_clause_ids())
        return [
            clause for clause in self.store.list(CLAUSES)
            if clause.is_active
            and clause.requirement == ClauseRequirement.REQUIRED
            and clause.id not in bound
        ]

    # --- helpers ---

    def _get_clause(self, clause_id: str) -> Clause:
        clause = self.store.get(CLAUSES, clause_id)
        if clause is None:
            raise NotFound(f"Clause {clause_id} not found", extra={'clause_id': clause_id})
        return clause

    def _get_mutable(self, template_id: str) -> Template:
        template = self.get_template(template_id)
        if template.status == TemplateStatus.ARCHIVED:
            logger.warning(f"Rejected change to archived template {template_id}")
            raise PreconditionFailed(
                f"Template {template_id} is archived",
                extra={'template_id': template_id, 'status': TemplateStatus.ARCHIVED.value},
            )
        return template

    def _check_compatible(self, template: Template, clause: Clause) -> None:
        bound = template.bound_clause_ids()
        for conflicting_id in clause.incompatible_with:
            if conflicting_id in bound:
                conflicting = self.store.get(CLAUSES, conflicting_id)
                conflicting_name = conflicting.name if conflicting is not None else conflicting_id
                logger.warning(
                    f"Rejected clause {clause.id} for template {template.id}: "
                    f"incompatible with {conflicting_id}"
                )
                raise ConflictError(
                    f'Clause "{clause.name}" is incompatible with existing clause "{conflicting_name}"',
                    fields=['clause_id'],
                    extra={'clause_id': clause.id, 'conflicting_clause_id': conflicting_id},
                )

    @staticmethod
    def _next_order(template: Template) -> int:
        if not template.clauses:
            return 0
        return max(binding.order for binding in template.clauses) + 1

    def _save(self, template: Template, message: str, now=None) -> Template:
        template.updated_at = now or timezone.now()
        stored = self.store.put(TEMPLATES, template, expected_revision=template.revision)
        logger.info(message)
        return stored

