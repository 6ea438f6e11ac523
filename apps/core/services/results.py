# apps/core/services/results.py

from dataclasses import dataclass, field
from typing import Any

from rest_framework import status

# error_code -> HTTP status used by the API views.
ERROR_STATUS = {
    'validation': status.HTTP_400_BAD_REQUEST,
    'forbidden': status.HTTP_403_FORBIDDEN,
    'not_found': status.HTTP_404_NOT_FOUND,
    'already_rated': status.HTTP_409_CONFLICT,
    'cooldown': status.HTTP_429_TOO_MANY_REQUESTS,
    'store_error': status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass
class OperationResult:
    """
    Outcome of a service operation. Failures never escape a service as
    exceptions; they come back here with an error_code and a message that
    is safe to show to the visitor.
    """
    success: bool
    message: str
    error_code: str | None = None
    errors: dict[str, list[str]] | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, **data) -> 'OperationResult':
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error_code: str, message: str, errors=None) -> 'OperationResult':
        return cls(success=False, message=message, error_code=error_code, errors=errors)

    @property
    def http_status(self) -> int:
        if self.success:
            return status.HTTP_200_OK
        return ERROR_STATUS.get(self.error_code, status.HTTP_400_BAD_REQUEST)

    def to_dict(self):
        payload = {'success': self.success, 'message': self.message}
        if self.error_code is not None:
            payload['error_code'] = self.error_code
        if self.errors is not None:
            payload['errors'] = self.errors
        payload.update(self.data)
        return payload
