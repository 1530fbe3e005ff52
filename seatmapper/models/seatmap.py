from sqlalchemy import Column, String, Boolean, Integer, DateTime, JSON, func
from seatmapper.db.session import Base

class SeatMapRecord(Base):
    """Stored seat map: the exported document plus a few listing columns."""
    __tablename__ = "seat_maps"

    id = Column(String(64), primary_key=True)  # the document's own id
    name = Column(String(255), nullable=False)
    document = Column(JSON, nullable=False)
    seat_count = Column(Integer, nullable=False, default=0)
    document_updated_at = Column(String(40), nullable=False)
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
