"""Abstract per-tenant document store interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any


Document = dict[str, Any]


class DocumentStore(ABC):
    """Abstract document store partitioned by tenant and collection.

    Documents are plain dictionaries. Documents returned by the store carry
    their key under ``id`` and the ingestion ``sequence`` the store assigned
    when the document was first written. There are no multi-document
    transactions: every write is applied on its own.

    Write failures are reported as ``PersistenceError``; a refused partial
    update is reported as ``UpdateRejectedError``.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create backing tables if needed."""
        pass

    @abstractmethod
    def get(self, tenant: str, collection: str, key: str) -> Optional[Document]:
        """Get a document by key."""
        pass

    @abstractmethod
    def query(
        self,
        tenant: str,
        collection: str,
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[Document]:
        """Scan a collection with equality filters.

        Args:
            tenant: Tenant scope
            collection: Collection name
            filters: Optional field/value pairs that must all match
            limit: Optional maximum number of documents to return

        Returns:
            Matching documents in ingestion order
        """
        pass

    @abstractmethod
    def add(self, tenant: str, collection: str, data: Document, key: Optional[str] = None) -> str:
        """Insert a new document and assign its sequence. Returns the key."""
        pass

    @abstractmethod
    def update_fields(self, tenant: str, collection: str, key: str, fields: Document) -> None:
        """Merge fields into an existing document."""
        pass

    @abstractmethod
    def upsert(self, tenant: str, collection: str, key: str, data: Document) -> None:
        """Replace a document's body, creating it if needed."""
        pass

    @abstractmethod
    def delete(self, tenant: str, collection: str, key: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        pass
