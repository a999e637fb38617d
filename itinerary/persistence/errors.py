"""Persistence-specific exceptions."""


class PersistenceError(Exception):
    """Base exception for all persistence errors."""


class DocumentNotFoundError(PersistenceError):
    """Raised when a Firestore document does not exist."""

    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} not found")


class StoreOperationError(PersistenceError):
    """Raised when Firestore rejects a read or write (network, auth, quota)."""

    def __init__(self, operation: str, path: str, cause: Exception):
        self.operation = operation
        self.path = path
        super().__init__(f"{operation} on {path} failed: {cause}")


class BackendInitError(PersistenceError):
    """Raised when the Firestore client cannot be constructed."""
