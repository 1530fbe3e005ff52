"""
Import/export of the seat map document and background image acceptance.

Only the parsing and validation contract lives here; reading files,
decoding images and talking to the network are the caller's business.
"""

import json
import logging
from typing import Optional, Union

from pydantic import ValidationError

from seatmapper.core.config import settings
from seatmapper.core.exceptions import BackgroundRejectedError, FieldError, SeatMapValidationError
from seatmapper.editor.coordinates import aspect_ratio
from seatmapper.schemas.seatmap import Background, SeatMap

logger = logging.getLogger(__name__)


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc)


def parse_seat_map(payload: Union[str, bytes]) -> SeatMap:
    """
    Parse and validate an exported seat map.

    Raises SeatMapValidationError with one FieldError per problem; nothing
    is returned on failure, so the caller's document stays untouched.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise SeatMapValidationError([FieldError("", "Payload is not UTF-8 text")])

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise SeatMapValidationError([FieldError("", f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")])

    if not isinstance(data, dict):
        raise SeatMapValidationError([FieldError("", "Seat map must be a JSON object")])

    try:
        return SeatMap.model_validate(data)
    except ValidationError as e:
        errors = [FieldError(_field_path(err["loc"]), err["msg"]) for err in e.errors()]
        logger.warning("Rejected seat map import with %d error(s)", len(errors))
        raise SeatMapValidationError(errors)


def dump_seat_map(doc: SeatMap) -> str:
    """Serialize to the import format (camelCase keys, unset optionals omitted)."""
    data = doc.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def check_background_upload(content_type: Optional[str], size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise BackgroundRejectedError(
            BackgroundRejectedError.INVALID_TYPE,
            "Invalid file type. Please select an image file.",
        )
    if size > settings.max_background_bytes:
        raise BackgroundRejectedError(
            BackgroundRejectedError.TOO_LARGE,
            f"File size exceeds {settings.MAX_BACKGROUND_SIZE_MB}MB limit.",
        )


def accept_background(content_type: Optional[str], size: int, url: str,
                      width: int, height: int) -> Background:
    """Validate an uploaded image and describe it as a document background."""
    try:
        check_background_upload(content_type, size)
    except BackgroundRejectedError as e:
        logger.warning("Background rejected (%s): %s", e.code, e.message)
        raise

    ratio = aspect_ratio(width, height)
    return Background(
        url=url,
        width=width,
        height=height,
        aspect_ratio=ratio if ratio > 0 else None,
    )
