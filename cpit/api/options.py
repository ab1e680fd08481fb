"""
Request options.

Every option returns a callable that takes the CockpitRequest being built
and either updates it or raises ValidationError. Options are applied in the
order given, so later options override earlier ones.

Example:
    client.list_items(
        "posts",
        with_filter({"published": True}),
        with_sort({"_created": -1}),
        with_limit(10),
        with_skip(0),
    )
"""

import json
from typing import Any, Callable, Mapping, MutableMapping, Optional, Union, IO

import requests

from ..config import normalize_base_url
from ..exceptions import ValidationError, EmptyValueError
from ._http import CockpitRequest, JsonBody, RawBody

Option = Callable[[CockpitRequest], None]

# Resize modes for images
RESIZE_MODE_THUMBNAIL = "thumbnail"
RESIZE_MODE_BEST_FIT = "bestFit"
RESIZE_MODE_RESIZE = "resize"
RESIZE_MODE_FIT_TO_WIDTH = "fitToWidth"
RESIZE_MODE_FIT_TO_HEIGHT = "fitToHeight"

RESIZE_MODES = (
    RESIZE_MODE_THUMBNAIL,
    RESIZE_MODE_BEST_FIT,
    RESIZE_MODE_RESIZE,
    RESIZE_MODE_FIT_TO_WIDTH,
    RESIZE_MODE_FIT_TO_HEIGHT,
)

# Output formats for images
MIME_TYPE_AUTO = "auto"
MIME_TYPE_GIF = "gif"
MIME_TYPE_JPEG = "jpeg"
MIME_TYPE_PNG = "png"
MIME_TYPE_WEBP = "webp"
MIME_TYPE_BMP = "bmp"

MIME_TYPES = (
    MIME_TYPE_AUTO,
    MIME_TYPE_GIF,
    MIME_TYPE_JPEG,
    MIME_TYPE_PNG,
    MIME_TYPE_WEBP,
    MIME_TYPE_BMP,
)

QueryValue = Union[str, Mapping[str, Any]]


def _query_value(value: QueryValue) -> str:
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return value


def with_session(session: Optional[requests.Session]) -> Option:
    """Use the given requests session for this call."""
    def option(r: CockpitRequest) -> None:
        r.session = session
    return option


def with_base_url(url: str) -> Option:
    """Override the base URL for this call."""
    def option(r: CockpitRequest) -> None:
        if not url:
            raise EmptyValueError("url is required")
        r.base_url = normalize_base_url(url)
    return option


def with_api_key(key: str) -> Option:
    """Override the API key for this call."""
    def option(r: CockpitRequest) -> None:
        if not key:
            raise EmptyValueError("api key is required")
        r.api_key = key
    return option


def with_debug_mode(enabled: bool) -> Option:
    """Enable or disable debug logging for this call."""
    def option(r: CockpitRequest) -> None:
        r.debug = enabled
    return option


def with_timeout(seconds: Optional[float]) -> Option:
    """Set the deadline of this call in seconds (None: wait forever)."""
    def option(r: CockpitRequest) -> None:
        if seconds is not None and seconds <= 0:
            raise ValidationError("timeout must be greater than 0")
        r.timeout = seconds
    return option


def with_output_headers(target: MutableMapping[str, str]) -> Option:
    """Copy the response headers into target after a successful call."""
    def option(r: CockpitRequest) -> None:
        r.output_headers = target
    return option


def with_body(value: Any) -> Option:
    """Send value encoded as JSON."""
    def option(r: CockpitRequest) -> None:
        r.body = JsonBody(value)
    return option


def with_raw_body(content: Union[bytes, str, IO[bytes]]) -> Option:
    """Send a pre-encoded JSON document (bytes, text or readable stream) as is."""
    def option(r: CockpitRequest) -> None:
        r.body = RawBody(content)
    return option


def with_data(value: Any) -> Option:
    """Send value wrapped in the ``{"data": ...}`` envelope used for upserts."""
    def option(r: CockpitRequest) -> None:
        r.body = JsonBody({"data": value})
    return option


def with_resize_mode(mode: str) -> Option:
    """Set the resize mode of an image."""
    def option(r: CockpitRequest) -> None:
        if mode not in RESIZE_MODES:
            raise ValidationError(
                f"invalid resize mode: {mode!r}",
                details=f"expected one of {', '.join(RESIZE_MODES)}"
            )
        r.set_param("m", mode)
    return option


def with_width(width: int) -> Option:
    """Set the width of an image."""
    def option(r: CockpitRequest) -> None:
        if width < 1:
            raise ValidationError("width must be greater than 0")
        r.set_param("w", str(width))
    return option


def with_height(height: int) -> Option:
    """Set the height of an image."""
    def option(r: CockpitRequest) -> None:
        if height < 1:
            raise ValidationError("height must be greater than 0")
        r.set_param("h", str(height))
    return option


def with_quality(quality: int) -> Option:
    """Set the quality of an image (1-100)."""
    def option(r: CockpitRequest) -> None:
        if quality < 1 or quality > 100:
            raise ValidationError("quality must be between 1 and 100")
        r.set_param("q", str(quality))
    return option


def with_mime(mime: str) -> Option:
    """Set the output format of an image."""
    def option(r: CockpitRequest) -> None:
        if mime not in MIME_TYPES:
            raise ValidationError(
                f"invalid mime type: {mime!r}",
                details=f"expected one of {', '.join(MIME_TYPES)}"
            )
        r.set_param("mime", mime)
    return option


def with_locale(locale: str) -> Option:
    """Request localized field values."""
    def option(r: CockpitRequest) -> None:
        r.set_param("locale", locale)
    return option


def with_fields(fields: QueryValue) -> Option:
    """
    Project the fields returned, using MongoDB projection syntax.

    Example to only retrieve the title field:
        with_fields({"title": 1})
    """
    def option(r: CockpitRequest) -> None:
        r.set_param("fields", _query_value(fields))
    return option


def with_filter(filter: QueryValue) -> Option:
    """
    Filter items, using MongoDB query syntax.

    Example to filter items with a title containing "cat" (case insensitive):
        with_filter({"title": {"$regex": "/cat/i"}})
    """
    def option(r: CockpitRequest) -> None:
        r.set_param("filter", _query_value(filter))
    return option


def with_sort(sort: QueryValue) -> Option:
    """
    Sort items.

    Examples:
        with_sort({"title": 1})   # ascending
        with_sort({"title": -1})  # descending
    """
    def option(r: CockpitRequest) -> None:
        r.set_param("sort", _query_value(sort))
    return option


def with_limit(limit: int) -> Option:
    """Limit the number of items returned."""
    def option(r: CockpitRequest) -> None:
        if limit < 1:
            raise ValidationError("limit must be greater than 0")
        r.set_param("limit", str(limit))
    return option


def with_skip(skip: int) -> Option:
    """
    Skip a number of items.

    Only has an effect together with with_limit. When both are set Cockpit
    answers with a paginated envelope that includes the total item count.
    """
    def option(r: CockpitRequest) -> None:
        if skip < 0:
            raise ValidationError("skip must be greater than or equal to 0")
        r.set_param("skip", str(skip))
    return option


def with_populate(enabled: bool) -> Option:
    """Resolve linked content items into embedded data."""
    def option(r: CockpitRequest) -> None:
        r.set_param("populate", "1" if enabled else "0")
    return option
