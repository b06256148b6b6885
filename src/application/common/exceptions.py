# -*- coding: utf-8 -*-
"""
Common Exceptions - 공통 예외 클래스

애플리케이션 전역에서 사용하는 커스텀 예외 정의
"""

from typing import Any


# ==================== Base Exception ====================


class ApplicationError(Exception):
    """
    애플리케이션 기본 예외

    모든 커스텀 예외의 베이스 클래스
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        return {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


# ==================== Validation Exceptions ====================


class ValidationError(ApplicationError):
    """검증 실패 예외"""

    def __init__(self, message: str = "Validation failed", details: dict[str, Any] | None = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)


class InvalidInputError(ValidationError):
    """잘못된 입력 예외"""

    def __init__(self, field: str, message: str = "Invalid input"):
        super().__init__(
            message=f"Invalid input for field: {field}",
            details={"field": field, "error": message},
        )


# ==================== External Service Exceptions ====================


class ExternalServiceError(ApplicationError):
    """외부 서비스 오류 예외"""

    def __init__(
        self,
        service: str,
        message: str,
        code: str = "EXTERNAL_SERVICE_ERROR",
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=f"{service} error: {message}",
            code=code,
            status_code=status_code,
            details=details,
        )


class CacheError(ExternalServiceError):
    """캐시 오류 예외"""

    def __init__(
        self,
        message: str,
        code: str = "CACHE_ERROR",
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            service="Cache",
            message=message,
            code=code,
            status_code=status_code,
            details=details,
        )


# ==================== Cache Exceptions ====================


class CacheConnectionError(CacheError):
    """
    캐시 연결 실패 예외

    연결 확인(ping) 실패, 인증 실패, 종료된 클라이언트 사용 시 발생
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message, code="CACHE_CONNECTION_ERROR", status_code=503, details=details
        )


class CacheStoreError(CacheError):
    """
    캐시 연산 실패 예외

    개별 명령의 네트워크/서버 측 오류 (재시도 없이 호출자에게 전달)
    """

    def __init__(
        self, operation: str, message: str, details: dict[str, Any] | None = None
    ):
        super().__init__(
            message=f"{operation} failed: {message}",
            code="CACHE_STORE_ERROR",
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation


class CacheSerializationError(CacheStoreError):
    """저장할 수 없는 값 타입 예외"""

    def __init__(self, key: str, value_type: str):
        super().__init__(
            operation="set",
            message=f"unsupported value type: {value_type}",
            details={"key": key, "value_type": value_type},
        )


class CacheKeyNotFoundError(CacheError):
    """캐시 키 없음 예외"""

    def __init__(self, key: str):
        super().__init__(
            message=f"key not found: {key}",
            code="CACHE_KEY_NOT_FOUND",
            status_code=404,
            details={"key": key},
        )
        self.key = key


class CacheValueTypeError(CacheError, TypeError):
    """숫자가 아닌 값에 대한 증감 연산 예외"""

    def __init__(self, key: str, message: str):
        super().__init__(
            message=f"value at {key} is not numeric: {message}",
            code="CACHE_VALUE_TYPE_ERROR",
            status_code=422,
            details={"key": key},
        )
        self.key = key


# ==================== Configuration Exceptions ====================


class ConfigurationError(ApplicationError):
    """설정 오류 예외"""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR", status_code=500)
