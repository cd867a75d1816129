
class ApplicationError(Exception):
    """Base class for application-specific errors."""
    pass

class InvalidProductError(ApplicationError):
    """Raised when the payload holds no product or lacks its storage keys."""
    pass

class MalformedProductError(ApplicationError):
    """Raised when the request body cannot be deserialized into a product."""
    def __init__(self, message="Malformed product data.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception

class DatabaseError(ApplicationError):
    """Raised for table storage failures not specifically handled."""
    def __init__(self, message="A database error occurred.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception

class ProductAlreadyExistsError(DatabaseError):
    """Raised when an entity with the same PartitionKey and RowKey already exists."""
    pass
