from fastapi import APIRouter

# Seat maps: storage, import/export, background upload
from seatmapper.api.v1.maps import router as maps_router

api_router = APIRouter()

api_router.include_router(maps_router)
