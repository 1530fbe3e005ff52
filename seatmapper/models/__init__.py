from seatmapper.models.seatmap import SeatMapRecord
