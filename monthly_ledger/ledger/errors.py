"""
Ledger error taxonomy.

Every error is converted into a `{status: "error", message}` response at
the request boundary; the message is the only payload.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParameters(LedgerError):
    """Missing or out-of-range request parameters."""
    pass


class InvalidRowIndex(InvalidParameters):
    """Row number outside the partition's data rows."""
    pass


class PartitionNotFound(LedgerError):
    """A mutating operation named a partition that does not exist."""
    
    def __init__(self, name: str):
        super().__init__(f"Sheet not found: {name}")
        self.name = name


class InvalidTimestamp(LedgerError):
    """Timestamp text matched neither accepted form."""
    
    def __init__(self, value: str):
        super().__init__(f"Invalid timestamp: {value!r}")
        self.value = value


class OperationFailed(LedgerError):
    """The backing store rejected a write."""
    pass
