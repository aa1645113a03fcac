"""
애플리케이션 공통 예외 클래스 정의
"""
from typing import Any, Optional


class AppException(Exception):
    """애플리케이션 기본 예외 클래스"""
    error_code: str = "application_error"

    def __init__(self, message: str = "An application error occurred", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppException):
    """리소스를 찾을 수 없을 때 발생하는 범용 예외"""
    error_code = "resource_not_found"

    def __init__(self, resource_type: str = "Resource", identifier: Any = None, status_code: int = 404):
        if identifier is not None:
            message = f"{resource_type} with id {identifier} not found."
        else:
            message = f"{resource_type} not found."
        super().__init__(message, status_code)
        self.resource_type = resource_type
        self.identifier = identifier


class ConflictError(AppException):
    """리소스 충돌 예외 (예: 고유해야 하는 비즈니스 키가 이미 존재)"""
    error_code = "conflict"

    def __init__(self, message: str = "The request conflicts with existing data.", status_code: int = 409):
        super().__init__(message, status_code)


class DuplicateBusinessKeyError(ConflictError):
    """이름/제목 등 비즈니스 키 중복"""

    def __init__(self, resource_label: str, key_field: str, value: Any):
        message = f"A {resource_label} with {key_field} '{value}' is already registered."
        super().__init__(message)
        self.resource_label = resource_label
        self.key_field = key_field
        self.value = value


class DependentRecordsError(ConflictError):
    """종속 레코드가 존재하여 삭제할 수 없음"""
    error_code = "dependent_records"

    def __init__(self, resource_label: str, dependent_label: str, count: int):
        message = (
            f"Cannot delete the {resource_label}. "
            f"There are {count} {dependent_label}(s) linked to it."
        )
        super().__init__(message)
        self.resource_label = resource_label
        self.dependent_label = dependent_label
        self.count = count


class InvalidReferenceError(AppException):
    """존재하지 않는 외래 키 참조 (Developer id, Genre id 등)"""
    error_code = "invalid_reference"

    def __init__(self, resource_label: str, identifier: Any, status_code: int = 400):
        message = f"{resource_label.capitalize()} with id {identifier} does not exist."
        super().__init__(message, status_code)
        self.resource_label = resource_label
        self.identifier = identifier


class AuthenticationError(AppException):
    """인증 실패 예외"""
    error_code = "authentication_failed"

    def __init__(self, message: str = "Authentication failed", status_code: int = 401):
        super().__init__(message, status_code)


class RateLimitExceededError(AppException):
    """요청 속도 제한 초과"""
    error_code = "rate_limit_exceeded"

    def __init__(self, limit: int, window: int, retry_after: Optional[int] = None, status_code: int = 429):
        message = f"Request limit exceeded ({limit} requests per {window} second(s)). Try again shortly."
        super().__init__(message, status_code)
        self.limit = limit
        self.window = window
        self.retry_after = retry_after
