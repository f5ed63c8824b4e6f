"""Error types raised while validating and persisting records."""
from typing import Optional


class ServiceError(Exception):
    """Base error surfaced to callers of the stores."""

    code = 'SERVICE_ERROR'

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {'code': self.code, 'field': self.field, 'message': self.message}


class NotFoundError(ServiceError):
    code = 'NOT_FOUND'


class ValidationError(ServiceError):
    """A record was rejected before it was written."""

    code = 'VALIDATION_ERROR'


class RequiredFieldEmptyError(ValidationError):
    code = 'REQUIRED_FIELD_EMPTY'

    def __init__(self, field: str):
        super().__init__(f"{field} cannot be empty", field=field)


class InvalidFormatError(ValidationError):
    code = 'INVALID_FORMAT'


class InvalidRangeError(ValidationError):
    code = 'INVALID_RANGE'


class InvalidCollectionError(ValidationError):
    code = 'INVALID_COLLECTION'

    def __init__(self, field: str):
        super().__init__(
            f"{field} must be a non-empty array of non-empty strings",
            field=field
        )


class InvalidEmailError(ValidationError):
    code = 'INVALID_EMAIL'

    def __init__(self, field: str = 'email'):
        super().__init__(f"{field} must be a valid email address", field=field)


class DanglingReferenceError(ValidationError):
    code = 'DANGLING_REFERENCE'


class DuplicateKeyError(ValidationError):
    code = 'DUPLICATE_KEY'
