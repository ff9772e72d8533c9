"""
Error taxonomy for the lease template engine

Every error carries a machine-readable ``kind``, a human-readable message and
an optional list of offending fields. They subclass DRF's ``APIException`` so
the HTTP layer can render them with the stock exception handler.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rest_framework import status
from rest_framework.exceptions import APIException


class LeaseTemplateError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = 'error'
    default_detail = 'Lease template operation failed.'

    def __init__(
        self,
        message: Optional[str] = None,
        fields: Optional[List[str]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or str(self.default_detail)
        self.fields = list(fields or [])
        self.extra = dict(extra or {})
        super().__init__(detail=self.message, code=self.kind)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'kind': self.kind,
            'message': self.message,
            'fields': self.fields,
        }
        payload.update(self.extra)
        return payload


class NotFound(LeaseTemplateError):
    """Referenced clause, template or generated lease does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    kind = 'not_found'
    default_detail = 'Resource not found.'


class ValidationError(LeaseTemplateError):
    """Malformed payload, or required variables missing at generation."""
    status_code = status.HTTP_400_BAD_REQUEST
    kind = 'validation_error'
    default_detail = 'Invalid input.'


class ConflictError(LeaseTemplateError):
    status_code = status.HTTP_409_CONFLICT
    kind = 'conflict'
    default_detail = 'Conflicting change.'


class ConcurrentModificationError(ConflictError):
    """A write was based on a stale read of the record."""
    kind = 'concurrent_modification'
    default_detail = 'Record was modified by another writer.'


class PreconditionFailed(LeaseTemplateError):
    status_code = status.HTTP_412_PRECONDITION_FAILED
    kind = 'precondition_failed'
    default_detail = 'Operation not allowed in the current state.'
