import base64
from io import BytesIO
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile, status
from PIL import Image, UnidentifiedImageError
from sqlalchemy import func
from sqlalchemy.orm import Session

from seatmapper.core.config import settings
from seatmapper.core.exceptions import BackgroundRejectedError, SeatMapValidationError
from seatmapper.db.session import get_db
from seatmapper.editor.document import new_seat_map
from seatmapper.editor.io import accept_background, check_background_upload, dump_seat_map, parse_seat_map
from seatmapper.models.seatmap import SeatMapRecord
from seatmapper.schemas.common import (
    BackgroundUploadResponse,
    FieldErrorItem,
    PaginatedResponse,
    ValidationErrorResponse,
)
from seatmapper.schemas.seatmap import SeatMap, SeatMapCreate, SeatMapSummary
from seatmapper.utils.storage import get_active_record, id_in_use, load_document, save_document, to_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/maps", tags=["Seat Maps"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validation_failed(e: SeatMapValidationError) -> HTTPException:
    body = ValidationErrorResponse(
        error="VALIDATION_ERROR",
        message="Seat map failed validation",
        errors=[FieldErrorItem(path=err.path, message=err.message) for err in e.errors],
    )
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=body.model_dump())


def _background_failed(e: BackgroundRejectedError) -> HTTPException:
    code = (
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        if e.code == BackgroundRejectedError.TOO_LARGE
        else status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    )
    return HTTPException(status_code=code, detail={"error": e.code, "message": e.message})


def _require(db: Session, map_id: str) -> SeatMapRecord:
    record = get_active_record(db, map_id)
    if not record:
        raise HTTPException(status_code=404, detail="Seat map not found")
    return record


# ---------------------------------------------------------------------------
# Seat map CRUD
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[SeatMapSummary])
def list_maps(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    total = (
        db.query(func.count(SeatMapRecord.id))
        .filter(SeatMapRecord.is_active == True)  # noqa: E712
        .scalar()
    )
    rows = (
        db.query(SeatMapRecord)
        .filter(SeatMapRecord.is_active == True)  # noqa: E712
        .order_by(SeatMapRecord.document_updated_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        data=[to_summary(r) for r in rows],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.post(
    "/",
    response_model=SeatMap,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_map(data: Optional[SeatMapCreate] = None, db: Session = Depends(get_db)):
    doc = new_seat_map(data.name if data else None)
    save_document(db, doc)
    return doc


@router.get("/{map_id}", response_model=SeatMap, response_model_exclude_none=True)
def get_map(map_id: str, db: Session = Depends(get_db)):
    return load_document(_require(db, map_id))


@router.put("/{map_id}", response_model=SeatMap, response_model_exclude_none=True)
def replace_map(map_id: str, doc: SeatMap, db: Session = Depends(get_db)):
    if doc.id != map_id:
        raise HTTPException(status_code=400, detail="Document id does not match the URL")
    _require(db, map_id)
    save_document(db, doc)
    return doc


@router.delete("/{map_id}", status_code=status.HTTP_200_OK)
def delete_map(map_id: str, db: Session = Depends(get_db)):
    record = _require(db, map_id)
    record.is_active = False
    db.commit()
    logger.info("Deleted seat map %s", map_id)
    return {"id": map_id, "is_active": False}


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@router.get("/{map_id}/export")
def export_map(map_id: str, db: Session = Depends(get_db)):
    record = _require(db, map_id)
    doc = load_document(record)
    filename = f"{doc.name or 'seatmap'}.json".replace('"', "")
    return Response(
        content=dump_seat_map(doc),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/import",
    response_model=SeatMap,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def import_map(request: Request, db: Session = Depends(get_db)):
    """
    Store an exported seat map file sent as the raw request body.
    Rejected payloads come back as an itemized list of field errors.
    A file whose id is already in use (active or deleted) is stored as a new
    map under a fresh id, so importing never overwrites or restores a map.
    """
    payload = await request.body()
    try:
        doc = parse_seat_map(payload)
    except SeatMapValidationError as e:
        raise _validation_failed(e)

    if id_in_use(db, doc.id):
        new_id = str(uuid.uuid4())
        logger.info("Imported seat map id %s already in use, stored as %s", doc.id, new_id)
        doc = doc.model_copy(update={"id": new_id})

    save_document(db, doc)
    return doc


# ---------------------------------------------------------------------------
# Background image upload
# ---------------------------------------------------------------------------


@router.post("/background", response_model=BackgroundUploadResponse)
async def upload_background(file: UploadFile = File(...)):
    # Read one byte past the cap so oversized files are detected without loading them whole
    data = await file.read(settings.max_background_bytes + 1)
    try:
        check_background_upload(file.content_type, len(data))
    except BackgroundRejectedError as e:
        raise _background_failed(e)

    try:
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
    except UnidentifiedImageError:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail={"error": BackgroundRejectedError.INVALID_TYPE, "message": "File is not a readable image."},
        )

    url = f"data:{file.content_type};base64,{base64.b64encode(data).decode('ascii')}"
    background = accept_background(file.content_type, len(data), url, width, height)
    return BackgroundUploadResponse(
        url=background.url,
        width=width,
        height=height,
        aspect_ratio=background.aspect_ratio or 0,
    )
