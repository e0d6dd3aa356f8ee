"""Write policy for stamping computed balances onto stored records."""

import logging
from enum import Enum
from typing import Any

from fundbook.database.base import Document, DocumentStore
from fundbook.domain.errors import PersistenceError

logger = logging.getLogger(__name__)

# Keys managed by the store or used only while a replay runs; they are
# never written back as part of a full overwrite.
TRANSIENT_FIELDS = ("id", "sequence")


class WriteOutcome(Enum):
    """How a record write ended."""

    PATCHED = "patched"
    OVERWRITTEN = "overwritten"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self is not WriteOutcome.FAILED


class FallbackWritePolicy:
    """Patch the stamped fields, else overwrite the whole record, else give up.

    A failed write is logged and reported as WriteOutcome.FAILED; it never
    raises, so one bad record cannot abort a batch.
    """

    def write(
        self,
        store: DocumentStore,
        tenant: str,
        collection: str,
        document: Document,
        fields: dict[str, Any],
    ) -> WriteOutcome:
        """Persist fields onto a stored document.

        Args:
            store: Document store to write to
            tenant: Tenant scope
            collection: Collection holding the document
            document: The document as it was read from the store
            fields: Fields to set on the document

        Returns:
            Outcome of the write
        """
        key = document["id"]
        try:
            store.update_fields(tenant, collection, key, fields)
            return WriteOutcome.PATCHED
        except PersistenceError as patch_error:
            logger.warning(
                "Field update failed for %s/%s, trying full overwrite: %s", collection, key, patch_error
            )

        full_document = {k: v for k, v in document.items() if k not in TRANSIENT_FIELDS}
        full_document.update(fields)
        try:
            store.upsert(tenant, collection, key, full_document)
        except PersistenceError as overwrite_error:
            logger.error("Both update and overwrite failed for %s/%s: %s", collection, key, overwrite_error)
            return WriteOutcome.FAILED

        logger.info("Full overwrite succeeded for %s/%s", collection, key)
        return WriteOutcome.OVERWRITTEN
