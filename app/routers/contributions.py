"""
contributions.py

납입금 장부(Contribution Ledger) API 모음.

주요 기능:
- 납입금 목록 조회 (관리자: 전체 / 회원: 본인 것만)
- 납입금 등록 및 상태 변경 (관리자)
- 납입 증빙 파일 업로드 (multipart 필드 `proof`, JPEG/PNG/PDF, 5MB 이하)
- 관리자용 CSV / Excel(xlsx) 내보내기

설계 원칙:
- 비즈니스 로직은 service 계층(app.services.contributions)에 위임
- 이 라우터는 요청/응답 처리, 권한 확인, 커밋/롤백에만 집중
- 증빙이 새로 올라오면 상태는 항상 Pending으로 되돌아감 (관리자 재확인)

관련 파일:
- app.services.contributions : 상태 / 증빙 규칙
- app.models.contribution    : Contribution 모델
- app.schemas.contribution   : 요청/응답 스키마
"""

import csv
import io

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from openpyxl import Workbook
from sqlalchemy.orm import Session
from starlette.responses import Response, StreamingResponse

from app.core.config import settings
from app.core.deps import get_current_admin, get_current_principal, get_db, get_storage
from app.core.errors import InvalidArgument, ServiceError
from app.schemas.auth import Principal
from app.schemas.contribution import (
    ContributionCreateRequest,
    ContributionResponse,
    ContributionStatusUpdate,
)
from app.services import contributions as contribution_service
from app.services.storage import Storage

router = APIRouter(prefix="/contributions", tags=["contributions"])

EXPORT_HEADER = ["id", "member_id", "member_name", "month", "amount", "status", "payment_date", "proof_url"]


def _export_row(contribution, member) -> list:
    proof = contribution.proof_of_payment or {}
    return [
        contribution.id,
        contribution.member_id,
        member.name,
        contribution.month,
        contribution.amount,
        contribution.status,
        contribution.payment_date.isoformat() if contribution.payment_date else "",
        proof.get("url", ""),
    ]


"""
납입금 목록 조회 API

- 관리자는 전체, 일반 회원은 본인 납입금만
- 최신 id 순 정렬

"""
@router.get("")
def list_contributions(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rows = contribution_service.list_contributions(db, principal)
    return {
        "data": [ContributionResponse.model_validate(c) for c in rows],
        "meta": {"count": len(rows)},
    }


"""
관리자용 납입 현황 CSV 다운로드 API

- month 지정 시 해당 월 라벨(예: 'January 2026')만
- UTF-8 BOM을 추가하여 Excel에서 바로 열 수 있도록 처리

"""
@router.get("/export")
def export_contributions_csv(
    month: str | None = Query(default=None, description="예: January 2026"),
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
):
    rows = contribution_service.export_rows(db, admin, month=month)

    def generate():
        # Excel에서 UTF-8 CSV 깨짐 방지를 위해 BOM(Byte Order Mark) 먼저 출력
        yield "\ufeff"

        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(EXPORT_HEADER)
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        for contribution, member in rows:
            writer.writerow(_export_row(contribution, member))
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    suffix = f"_{month.replace(' ', '_')}" if month else ""
    headers = {"Content-Disposition": f'attachment; filename="contributions{suffix}.csv"'}
    return StreamingResponse(generate(), media_type="text/csv; charset=utf-8", headers=headers)


# 관리자용 납입 현황 Excel(xlsx) 다운로드 API
@router.get("/export.xlsx")
def export_contributions_xlsx(
    month: str | None = Query(default=None, description="예: January 2026"),
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
):
    rows = contribution_service.export_rows(db, admin, month=month)

    wb = Workbook()
    ws = wb.active
    ws.title = "contributions"

    ws.append(EXPORT_HEADER)
    for contribution, member in rows:
        ws.append(_export_row(contribution, member))

    buf = io.BytesIO()
    wb.save(buf)

    suffix = f"_{month.replace(' ', '_')}" if month else ""
    headers = {"Content-Disposition": f'attachment; filename="contributions{suffix}.xlsx"'}
    return Response(
        content=buf.getvalue(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=headers,
    )


"""
납입금 등록 API (관리자 전용)

- status가 Paid면 payment_date를 현재 시각으로 기록
- 존재하지 않는 회원이면 404

"""
@router.post("", status_code=status.HTTP_201_CREATED)
def create_contribution(
    body: ContributionCreateRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        contribution = contribution_service.create_contribution(
            db,
            principal,
            member_id=body.member_id,
            month=body.month,
            amount=body.amount,
            status=body.status,
        )
        db.commit()
        db.refresh(contribution)
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "message": "Contribution created successfully",
        "data": ContributionResponse.model_validate(contribution),
    }


# 납입금 상태 변경 (관리자 전용) - 변경된 레코드 반환
@router.put("/{contribution_id}")
def update_contribution_status(
    contribution_id: int,
    body: ContributionStatusUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    try:
        contribution = contribution_service.update_contribution_status(
            db, principal, contribution_id, body.status
        )
        db.commit()
        db.refresh(contribution)
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {"data": ContributionResponse.model_validate(contribution)}


"""
납입 증빙 업로드 API

- 로그인한 누구나 가능
- 형식/용량 검증 실패 시 장부는 변경하지 않고 400
- 성공 시 proof_of_payment 교체, status는 Pending

"""
@router.post("/{contribution_id}/proof")
def upload_proof(
    contribution_id: int,
    proof: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    storage: Storage = Depends(get_storage),
):
    try:
        if proof is None:
            raise InvalidArgument("No file uploaded")
        # 제한보다 1바이트 더 읽어서 초과 여부만 판단
        data = proof.file.read(settings.MAX_UPLOAD_BYTES + 1)
        contribution = contribution_service.attach_proof(
            db,
            principal,
            storage,
            contribution_id,
            data=data,
            content_type=proof.content_type,
            original_name=proof.filename,
        )
        db.commit()
        db.refresh(contribution)
    except ServiceError as e:
        db.rollback()
        raise e.to_http()

    return {
        "data": ContributionResponse.model_validate(contribution),
        "proof_of_payment": contribution.proof_of_payment,
        "url": contribution.proof_of_payment["url"],
    }
