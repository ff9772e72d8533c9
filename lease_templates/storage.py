"""
Storage interface for lease template records

The services never hold records between calls. They read through ``get`` /
``list`` and write through ``put``, passing the revision they read so the
store can reject writes based on a stale copy.
"""
from __future__ import annotations

import abc
import copy
import logging
import threading
from typing import Dict, List, Optional, TypeVar

from .exceptions import ConcurrentModificationError
from .records import Clause, GeneratedLease, Template

logger = logging.getLogger(__name__)

RecordT = TypeVar('RecordT', Clause, Template, GeneratedLease)

CLAUSES = 'clauses'
TEMPLATES = 'templates'
GENERATED_LEASES = 'generated_leases'

RECORD_KINDS = (CLAUSES, TEMPLATES, GENERATED_LEASES)


class LeaseStore(abc.ABC):
    """
    Keyed record store used by the lease template services.

    ``put`` is a compare-and-swap on ``record.revision``:
    - ``expected_revision=None`` inserts a new record and fails if the id exists
    - otherwise the stored revision must equal ``expected_revision``
    On success the stored revision becomes ``expected_revision + 1`` (or 1 for
    an insert) and the written record is returned.
    """

    @abc.abstractmethod
    def get(self, kind: str, record_id: str) -> Optional[RecordT]:
        raise NotImplementedError

    @abc.abstractmethod
    def put(self, kind: str, record: RecordT, expected_revision: Optional[int] = None) -> RecordT:
        raise NotImplementedError

    @abc.abstractmethod
    def list(self, kind: str) -> List[RecordT]:
        raise NotImplementedError

    @staticmethod
    def _check_kind(kind: str) -> None:
        if kind not in RECORD_KINDS:
            raise ValueError(f"Unknown record kind: {kind}")


class InMemoryLeaseStore(LeaseStore):
    """Process-local store. Records are copied on the way in and out."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[str, Dict[str, object]] = {kind: {} for kind in RECORD_KINDS}

    def get(self, kind, record_id):
        self._check_kind(kind)
        with self._lock:
            record = self._records[kind].get(record_id)
            return copy.deepcopy(record) if record is not None else None

    def put(self, kind, record, expected_revision=None):
        self._check_kind(kind)
        with self._lock:
            bucket = self._records[kind]
            current = bucket.get(record.id)

            if expected_revision is None:
                if current is not None:
                    raise ConcurrentModificationError(
                        f"{kind} record {record.id} already exists",
                        extra={'record_id': record.id},
                    )
                new_revision = 1
            else:
                current_revision = current.revision if current is not None else None
                if current_revision != expected_revision:
                    logger.warning(
                        f"Stale write rejected for {kind} {record.id}: "
                        f"expected revision {expected_revision}, found {current_revision}"
                    )
                    raise ConcurrentModificationError(
                        f"{kind} record {record.id} was modified concurrently",
                        extra={'record_id': record.id},
                    )
                new_revision = expected_revision + 1

            stored = copy.deepcopy(record)
            stored.revision = new_revision
            bucket[record.id] = stored
            return copy.deepcopy(stored)

    def list(self, kind):
        self._check_kind(kind)
        with self._lock:
            return [copy.deepcopy(record) for record in self._records[kind].values()]
