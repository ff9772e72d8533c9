"""
Lease generation from active templates
"""
from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from django.utils import timezone

from .choices import GeneratedLeaseStatus, TemplateStatus, VariableType
from .conditions import should_include_clause
from .exceptions import NotFound, PreconditionFailed, ValidationError
from .interpolation import interpolate_variables
from .records import GeneratedClause, GeneratedLease, Template, TemplateVariable
from .storage import CLAUSES, GENERATED_LEASES, TEMPLATES, LeaseStore

logger = logging.getLogger(__name__)

NUMERIC_TYPES = (VariableType.NUMBER, VariableType.CURRENCY)


def render_clause_block(index: int, title: str, content: str) -> str:
    return f"{index}. {title}\n\n{content}"


class LeaseGenerationService:
    """
    Service for generating leases from templates and supplied values
    """

    def __init__(self, store: LeaseStore):
        self.store = store

    def generate(
        self,
        template_id: str,
        variables: Mapping[str, Any],
        property_id: Optional[str] = None,
        unit_id: Optional[str] = None,
        landlord_id: Optional[str] = None,
        tenant_ids: Optional[List[str]] = None,
        expires_at: Optional[datetime] = None,
    ) -> GeneratedLease:
        """
        Generate a lease document from an active template

        Args:
            template_id: Template to generate from
            variables: Values for the template's declared variables
            property_id, unit_id, landlord_id, tenant_ids: Optional references
                recorded on the lease
            expires_at: Optional expiry of the generated draft

        Returns:
            The persisted GeneratedLease (status draft)
        """
        template = self.store.get(TEMPLATES, template_id)
        if template is None:
            raise NotFound(f"Template {template_id} not found", extra={'template_id': template_id})
        if template.status != TemplateStatus.ACTIVE:
            logger.warning(f"Generation rejected: template {template_id} is {template.status}")
            raise PreconditionFailed(
                f"Template {template_id} is not active",
                extra={'template_id': template_id, 'status': str(template.status)},
            )

        supplied = dict(variables or {})
        self._check_required(template, supplied)
        effective = self._resolve_variables(template, supplied)
        self._check_validation(template, effective)

        clauses = self._assemble(template, effective)
        content = '\n\n'.join(
            render_clause_block(index, clause.title, clause.content)
            for index, clause in enumerate(clauses, start=1)
        )

        lease = GeneratedLease(
            id=str(uuid.uuid4()),
            template_id=template.id,
            template_version=template.version,
            variables=effective,
            content=content,
            clauses=clauses,
            status=GeneratedLeaseStatus.DRAFT,
            property_id=property_id,
            unit_id=unit_id,
            landlord_id=landlord_id,
            tenant_ids=list(tenant_ids or []),
            generated_at=timezone.now(),
            expires_at=expires_at,
        )
        stored = self.store.put(GENERATED_LEASES, lease)
        logger.info(
            f"Generated lease {stored.id} from template {template.id} "
            f"v{template.version} with {len(clauses)} clauses"
        )
        return stored

    def get_generated(self, lease_id: str) -> GeneratedLease:
        lease = self.store.get(GENERATED_LEASES, lease_id)
        if lease is None:
            raise NotFound(f"Generated lease {lease_id} not found", extra={'lease_id': lease_id})
        return lease

    def list_generated(
        self,
        property_id: Optional[str] = None,
        template_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[GeneratedLease]:
        results = [
            lease for lease in self.store.list(GENERATED_LEASES)
            if (not property_id or lease.property_id == property_id)
            and (not template_id or lease.template_id == template_id)
            and (not status or lease.status == status)
        ]
        results.sort(key=lambda lease: lease.generated_at or timezone.now(), reverse=True)
        return results

    def _check_required(self, template: Template, supplied: Dict[str, Any]) -> None:
        # Presence is judged on the supplied map; defaults do not satisfy it
        missing = [
            variable.name for variable in template.variables
            if variable.required and variable.name not in supplied
        ]
        if missing:
            logger.warning(f"Generation rejected for template {template.id}: missing {', '.join(missing)}")
            raise ValidationError(
                f"Missing required variables: {', '.join(missing)}",
                fields=missing,
            )

    @staticmethod
    def _resolve_variables(template: Template, supplied: Dict[str, Any]) -> Dict[str, Any]:
        # Only declared variables reach conditions and interpolation
        effective: Dict[str, Any] = {}
        for variable in template.variables:
            if variable.name in supplied:
                effective[variable.name] = supplied[variable.name]
            elif variable.default_value is not None:
                effective[variable.name] = variable.default_value
        return effective

    def _check_validation(self, template: Template, effective: Dict[str, Any]) -> None:
        errors: Dict[str, str] = {}
        for variable in template.variables:
            if variable.name not in effective or variable.validation is None:
                continue
            problem = _validation_problem(variable, effective[variable.name])
            if problem:
                errors[variable.name] = problem

        if errors:
            fields = list(errors)
            logger.warning(f"Generation rejected for template {template.id}: invalid {', '.join(fields)}")
            raise ValidationError(
                f"Invalid variable values: {', '.join(fields)}",
                fields=fields,
                extra={'errors': errors},
            )

    def _assemble(self, template: Template, effective: Dict[str, Any]) -> List[GeneratedClause]:
        clauses: List[GeneratedClause] = []
        for binding in template.ordered_bindings():
            if not should_include_clause(binding.conditions, effective):
                continue

            clause = self.store.get(CLAUSES, binding.clause_id)
            if clause is None:
                logger.warning(
                    f"Template {template.id} binds missing clause {binding.clause_id}, skipping"
                )
                continue

            text = binding.custom_content if binding.custom_content is not None else clause.content
            clauses.append(
                GeneratedClause(
                    clause_id=clause.id,
                    title=clause.title,
                    content=interpolate_variables(text, effective),
                    order=binding.order,
                )
            )
        return clauses


def _validation_problem(variable: TemplateVariable, value: Any) -> Optional[str]:
    """Describe why ``value`` breaks the variable's declared validation, or None."""
    rules = variable.validation
    if rules.options is not None and value not in rules.options:
        return f"must be one of: {', '.join(str(o) for o in rules.options)}"

    if variable.type in NUMERIC_TYPES and (rules.min is not None or rules.max is not None):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 'must be a number'
        if rules.min is not None and value < rules.min:
            return f"must be at least {rules.min:g}"
        if rules.max is not None and value > rules.max:
            return f"must be at most {rules.max:g}"

    if rules.pattern and isinstance(value, str) and not re.fullmatch(rules.pattern, value):
        return f"must match {rules.pattern}"

    return None
