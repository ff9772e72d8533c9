"""
Clause library: the catalog of reusable lease clauses
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

from django.utils import timezone

from .choices import ClauseRequirement
from .clause_library_data import DEFAULT_LEASE_CLAUSES
from .exceptions import NotFound
from .interpolation import interpolate_variables
from .records import Clause
from .serializers import ClauseCreateSerializer, ClauseUpdateSerializer, validate_payload
from .storage import CLAUSES, LeaseStore

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'name',
    'title',
    'category',
    'content',
    'summary',
    'requirement',
    'variables',
    'dependencies',
    'incompatible_with',
    'legal_reference',
    'is_active',
)


class ClauseLibraryService:
    """
    Create, edit and search library clauses.

    Clauses are edited in place: ``update_clause`` bumps ``version`` but keeps
    the id, so every template binding the clause sees the new text on its next
    generation. There is no delete; set ``is_active`` to False instead.
    """

    def __init__(self, store: LeaseStore):
        self.store = store

    def create_clause(self, payload: Mapping[str, Any]) -> Clause:
        """
        Add a clause to the library

        Args:
            payload: name, title, category, content and optional metadata

        Returns:
            The stored Clause (version 1, active)
        """
        data = validate_payload(ClauseCreateSerializer, payload)
        now = timezone.now()
        clause = Clause(
            id=str(uuid.uuid4()),
            name=data['name'],
            title=data['title'],
            category=data['category'],
            content=data['content'],
            requirement=data.get('requirement', ClauseRequirement.OPTIONAL),
            summary=data.get('summary'),
            jurisdiction=data.get('jurisdiction'),
            jurisdiction_type=data.get('jurisdiction_type'),
            variables=list(data.get('variables') or []),
            dependencies=list(data.get('dependencies') or []),
            incompatible_with=list(data.get('incompatible_with') or []),
            effective_date=data.get('effective_date'),
            expiry_date=data.get('expiry_date'),
            legal_reference=data.get('legal_reference'),
            version=1,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        stored = self.store.put(CLAUSES, clause)
        logger.info(f"Created clause {stored.id} ({stored.name})")
        return stored

    def get_clause(self, clause_id: str) -> Clause:
        clause = self.store.get(CLAUSES, clause_id)
        if clause is None:
            raise NotFound(f"Clause {clause_id} not found", extra={'clause_id': clause_id})
        return clause

    def update_clause(self, clause_id: str, partial: Mapping[str, Any]) -> Clause:
        """
        Merge the supplied fields into a clause and bump its version.

        Raises NotFound for an unknown id and ConcurrentModificationError if
        the clause changed between the read and the write.
        """
        clause = self.get_clause(clause_id)
        data = validate_payload(ClauseUpdateSerializer, partial, partial=True)

        for field_name in UPDATABLE_FIELDS:
            if field_name in data:
                value = data[field_name]
                if field_name in ('variables', 'dependencies', 'incompatible_with'):
                    value = list(value or [])
                setattr(clause, field_name, value)

        clause.version += 1
        clause.updated_at = timezone.now()
        stored = self.store.put(CLAUSES, clause, expected_revision=clause.revision)
        logger.info(f"Updated clause {stored.id} to version {stored.version}")
        return stored

    def find_clauses(
        self,
        category: Optional[str] = None,
        jurisdiction: Optional[str] = None,
        requirement: Optional[str] = None,
        search: Optional[str] = None,
        active_only: bool = True,
    ) -> List[Clause]:
        """
        Filter the library. All supplied filters must match.

        A jurisdiction filter keeps universal clauses (jurisdiction null)
        alongside the ones for that jurisdiction. Results are newest first.
        """
        needle = (search or '').strip().lower()
        results = []
        for clause in self.store.list(CLAUSES):
            if active_only and not clause.is_active:
                continue
            if category and clause.category != category:
                continue
            if requirement and clause.requirement != requirement:
                continue
            if jurisdiction and clause.jurisdiction not in (None, jurisdiction):
                continue
            if needle and not any(
                needle in (text or '').lower()
                for text in (clause.name, clause.title, clause.content)
            ):
                continue
            results.append(clause)

        results.sort(key=lambda c: c.created_at or timezone.now(), reverse=True)
        return results

    @staticmethod
    def group_by_category(clauses: Iterable[Clause]) -> Dict[str, List[Clause]]:
        grouped: Dict[str, List[Clause]] = {}
        for clause in clauses:
            grouped.setdefault(str(clause.category), []).append(clause)
        return grouped

    def preview_clause(self, clause_id: str, variables: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Interpolate one clause with sample values."""
        clause = self.get_clause(clause_id)
        variables = dict(variables or {})
        return {
            'clause_id': clause.id,
            'title': clause.title,
            'original': clause.content,
            'preview': interpolate_variables(clause.content, variables),
            'missing_variables': [name for name in clause.variables if not variables.get(name)],
        }

    def seed_default_clauses(self) -> int:
        """Install the default clause set if the library is empty. Returns count created."""
        if self.store.list(CLAUSES):
            return 0

        created = 0
        for entry in DEFAULT_LEASE_CLAUSES:
            self.create_clause(entry)
            created += 1
        logger.info(f"Seeded {created} default lease clauses")
        return created
