"""
Cockpit API Client Package.

Structure:
    - client.py: CockpitClient facade and module-level functions
    - _http.py: Request pipeline (build, execute, interpret)
    - options.py: Request options (with_limit, with_filter, ...)
    - content.py: Items and singletons
    - assets.py: Assets, images and links

Usage:
    from cpit.api import CockpitClient, with_limit

    client = CockpitClient(CockpitConfig(base_url=..., api_key=...))
    posts = client.content.list("posts", with_limit(10))
    post = client.get_item("posts", posts.data[0]["_id"])
"""

from .client import (
    CockpitClient,
    get_client,
    get_items,
    get_singleton,
    get_item,
    upsert_item,
    delete_item,
    get_asset,
    get_image,
    asset_link,
    upload_link,
)
from ._http import CockpitRequest, JsonBody, RawBody, new_request
from .content import ContentAPI
from .assets import AssetsAPI
from .options import (
    Option,
    with_session,
    with_base_url,
    with_api_key,
    with_debug_mode,
    with_timeout,
    with_output_headers,
    with_body,
    with_raw_body,
    with_data,
    with_resize_mode,
    with_width,
    with_height,
    with_quality,
    with_mime,
    with_locale,
    with_fields,
    with_filter,
    with_sort,
    with_limit,
    with_skip,
    with_populate,
)

__all__ = [
    # Main client
    "CockpitClient",
    "get_client",
    # Module-level operations
    "get_items",
    "get_singleton",
    "get_item",
    "upsert_item",
    "delete_item",
    "get_asset",
    "get_image",
    "asset_link",
    "upload_link",
    # Request pipeline
    "CockpitRequest",
    "JsonBody",
    "RawBody",
    "new_request",
    # Domain APIs
    "ContentAPI",
    "AssetsAPI",
    # Options
    "Option",
    "with_session",
    "with_base_url",
    "with_api_key",
    "with_debug_mode",
    "with_timeout",
    "with_output_headers",
    "with_body",
    "with_raw_body",
    "with_data",
    "with_resize_mode",
    "with_width",
    "with_height",
    "with_quality",
    "with_mime",
    "with_locale",
    "with_fields",
    "with_filter",
    "with_sort",
    "with_limit",
    "with_skip",
    "with_populate",
]
