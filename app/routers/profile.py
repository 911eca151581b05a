"""
profile.py

본인 프로필 사진 API.

- POST   /profile/photo : multipart 필드 `photo` (JPEG/PNG, 5MB 이하)
- DELETE /profile/photo : 사진 제거 (원격 삭제 실패해도 참조는 정리)

세션 토큰에 담긴 photo_url은 다음 로그인 때 갱신된다.

"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_current_principal, get_db, get_storage
from app.core.errors import InvalidArgument, ServiceError
from app.schemas.auth import Principal
from app.services import members as member_service
from app.services.storage import Storage

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post("/photo")
def upload_photo(
    photo: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
):
    try:
        if photo is None:
            raise InvalidArgument("No file uploaded")
        # 제한보다 1바이트 더 읽어서 초과 여부만 판단
        data = photo.file.read(settings.MAX_UPLOAD_BYTES + 1)
        member = member_service.upload_profile_photo(
            db, principal, storage, data=data, content_type=photo.content_type
        )
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "message": "Profile photo updated",
        "data": {"profile_photo_url": member.profile_photo_url},
    }


@router.delete("/photo")
def delete_photo(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
):
    try:
        member_service.delete_profile_photo(db, principal, storage)
        db.commit()
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {"message": "Profile photo removed", "data": {"profile_photo_url": None}}
