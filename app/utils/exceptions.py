"""커스텀 예외 클래스 모듈.

Custom exception classes module.
HTTP-facing errors are pre-configured HTTPException subclasses so services
can raise them without specifying status codes. Query-definition and
result-cardinality errors are plain exceptions raised by the data layer.

Usage:
    from app.utils.exceptions import NotFoundError
    raise NotFoundError("Member not found")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested resource (member, team) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when the request data is invalid beyond what Pydantic validation
    catches (e.g. a page number below 1).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class QueryDefinitionError(Exception):
    """네임드 쿼리 정의 오류 — 애플리케이션 시작 시 발생.

    Raised when a registered named query fails to compile against the
    database dialect, or when a projection query's columns do not match
    its target class.

    Attributes:
        query_name: 문제가 된 쿼리 이름 (Name of the offending query)
    """

    def __init__(self, query_name: str, reason: str) -> None:
        self.query_name: str = query_name
        super().__init__(f"Invalid named query '{query_name}': {reason}")


class IncorrectResultSizeError(Exception):
    """단건 조회에 여러 행이 일치했을 때 발생.

    Raised when a single-result query matches more than one row.
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected: int = expected
        self.actual: int = actual
        super().__init__(f"Incorrect result size: expected {expected}, actual {actual}")
