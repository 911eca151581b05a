"""
errors.py

서비스 계층에서 사용하는 도메인 예외 모음.

서비스 함수는 HTTP를 알지 못하므로 HTTPException 대신 이 예외를 던지고,
라우터가 트랜잭션을 롤백한 뒤 status_code / detail 그대로
HTTPException으로 변환한다.

- Unauthenticated   : 토큰 없음 (401)
- Forbidden         : 권한/소유권 위반, 잘못된 토큰 (403)
- NotFound          : 대상 없음 (404)
- Conflict          : 이메일 / 회원 번호 중복 (409)
- InvalidArgument   : 업로드 형식/용량, 빈 메시지, 짧은 비밀번호 (400)
- ResourceExhausted : 남은 회원 번호 없음 (503)
- Internal          : 예상하지 못한 저장소/업로드 실패 (500)

"""

from fastapi import HTTPException, status


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_http(self) -> HTTPException:
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return HTTPException(status_code=self.status_code, detail=self.detail, headers=headers)


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InvalidArgument(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid argument"


class ResourceExhausted(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "No available member numbers"


class Internal(ServiceError):
    pass
