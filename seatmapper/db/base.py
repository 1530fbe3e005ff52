
from seatmapper.db.session import Base
from seatmapper.models.seatmap import SeatMapRecord
