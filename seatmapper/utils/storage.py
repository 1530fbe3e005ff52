import json
import logging
from typing import Optional

from sqlalchemy.orm import Session

from seatmapper.editor.io import dump_seat_map
from seatmapper.models.seatmap import SeatMapRecord
from seatmapper.schemas.seatmap import SeatMap, SeatMapSummary

logger = logging.getLogger(__name__)


def get_active_record(db: Session, map_id: str) -> Optional[SeatMapRecord]:
    return (
        db.query(SeatMapRecord)
        .filter(SeatMapRecord.id == map_id, SeatMapRecord.is_active == True)  # noqa: E712
        .first()
    )


def save_document(db: Session, doc: SeatMap) -> SeatMapRecord:
    """
    Insert or overwrite the stored copy of ``doc``.

    The document is stored in its export form, so what comes back out of the
    database is exactly what an import of the exported file would produce.
    """
    payload = json.loads(dump_seat_map(doc))
    record = db.query(SeatMapRecord).filter(SeatMapRecord.id == doc.id).first()
    if record is None:
        record = SeatMapRecord(id=doc.id)
        db.add(record)

    record.name = doc.name
    record.document = payload
    record.seat_count = len(doc.seats)
    record.document_updated_at = doc.updated_at
    record.is_active = True

    db.commit()
    db.refresh(record)
    logger.info("Saved seat map %s (%d seats)", doc.id, record.seat_count)
    return record


def load_document(record: SeatMapRecord) -> SeatMap:
    return SeatMap.model_validate(record.document)


def to_summary(record: SeatMapRecord) -> SeatMapSummary:
    return SeatMapSummary(
        id=record.id,
        name=record.name,
        seat_count=record.seat_count,
        updated_at=record.document_updated_at,
    )


def id_in_use(db: Session, map_id: str) -> bool:
    """True when any stored map, deleted ones included, already has ``map_id``."""
    return db.query(SeatMapRecord.id).filter(SeatMapRecord.id == map_id).first() is not None
