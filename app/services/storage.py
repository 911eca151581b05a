"""
services/storage.py

업로드 파일(납입 증빙, 프로필 사진) 저장소.

- LocalStorage : MEDIA_ROOT 아래 디스크에 저장, MEDIA_URL 경로로 공개
- S3Storage    : S3 호환 오브젝트 스토리지 (boto3)

put_bytes()는 공개 URL을 돌려주고, delete()는 호출 측에서
실패를 무시할 수 있도록 StorageError만 던진다.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from app.core.errors import InvalidArgument

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class Storage:
    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> str:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalStorage(Storage):
    root: Path
    base_url: str = "/media"

    def _path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        if ".." in safe_key.split("/"):
            raise StorageError(f"invalid storage key: {key}")
        return self.root / safe_key

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> str:
        p = self._path(key)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            raise StorageError(f"failed to write {key}") from e
        return f"{self.base_url.rstrip('/')}/{key.lstrip('/')}"

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"failed to delete {key}") from e


@dataclass(frozen=True)
class S3Storage(Storage):
    endpoint: str
    region: str
    bucket: str
    access_key_id: str
    secret_access_key: str
    public_url: str = ""

    def _client(self):
        import boto3

        return boto3.client(
            "s3",
            endpoint_url=f"https://{self.endpoint}" if self.endpoint else None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )

    def _url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"https://{self.bucket}.{self.endpoint}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> str:
        from botocore.exceptions import BotoCoreError, ClientError

        extra: dict[str, object] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client().put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"failed to upload {key}") from e
        return self._url(key)

    def delete(self, key: str) -> None:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client().delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"failed to delete {key}") from e


def storage_from_settings(settings) -> Storage:
    backend = (settings.STORAGE_BACKEND or "local").strip().lower()
    if backend == "s3":
        return S3Storage(
            endpoint=settings.S3_ENDPOINT.strip(),
            region=settings.S3_REGION.strip(),
            bucket=settings.S3_BUCKET.strip(),
            access_key_id=settings.S3_ACCESS_KEY_ID.strip(),
            secret_access_key=settings.S3_SECRET_ACCESS_KEY.strip(),
            public_url=settings.S3_PUBLIC_URL.strip(),
        )
    # default local
    return LocalStorage(root=Path(settings.MEDIA_ROOT), base_url=settings.MEDIA_URL)


# 원격 삭제 실패가 로컬 참조 정리를 막지 않도록 로그만 남김
def delete_quietly(storage: Storage, key: str | None) -> None:
    if not key:
        return
    try:
        storage.delete(key)
    except StorageError:
        logger.warning("Best-effort storage delete failed for key=%s", key, exc_info=True)


PROOF_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "application/pdf": ".pdf",
}
PHOTO_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}


"""
업로드 파일 검증

- MIME 타입이 허용 목록에 없으면 InvalidArgument
- 비어 있거나 max_bytes를 넘으면 InvalidArgument
- 통과하면 저장 key에 쓸 확장자를 반환

"""

def validate_upload(content_type: str | None, size: int, *, allowed: dict[str, str], max_bytes: int) -> str:
    if content_type not in allowed:
        raise InvalidArgument("Invalid file type")
    if size <= 0:
        raise InvalidArgument("No file uploaded")
    if size > max_bytes:
        raise InvalidArgument(f"File too large (max {max_bytes // (1024 * 1024)}MB)")
    return allowed[content_type]
