"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataStoreError(DomainException):
    """Document store returned an error or is unavailable"""

    pass


class UnknownEntityError(DomainException):
    """No analyzer is registered for the requested entity"""

    pass
