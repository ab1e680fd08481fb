"""
Assets API - Asset records, images and links.
"""

from typing import Any
from urllib.parse import quote

from ..config import DefaultStore, strip_api_suffix
from ..exceptions import MissingConfigError
from ..models import File
from ._http import new_request, PATH_GET_ASSET, PATH_GET_IMAGE
from .options import Option


class AssetsAPI:
    """
    API for uploaded assets.

    Handles:
    - Asset metadata
    - Resized/converted images
    - Public asset and upload links
    """

    def __init__(self, store: DefaultStore):
        """
        Initialize Assets API.

        Args:
            store: Defaults every request starts from
        """
        self._store = store

    def get(self, asset_id: str, *options: Option, output_type: Any = File) -> Any:
        """
        Get asset metadata.

        Args:
            asset_id: Asset id
            *options: Request options
            output_type: Type the asset is decoded into

        Returns:
            The asset record, a File by default
        """
        r = new_request(self._store, "GET", PATH_GET_ASSET.format(id=quote(asset_id, safe="")))
        return r.apply(options).run(output_type)

    def get_image(self, asset_id: str, *options: Option) -> str:
        """
        Get the URL of an image rendered with the given options.

        Cockpit answers with the location of the generated image, not with
        JSON, so the body is returned as is.

        Args:
            asset_id: Asset id
            *options: Image options (with_resize_mode, with_width,
                with_height, with_quality, with_mime)

        Returns:
            The image location returned by Cockpit
        """
        r = new_request(self._store, "GET", PATH_GET_IMAGE.format(id=quote(asset_id, safe="")))
        return r.apply(options).run_raw()

    def _root_url(self, options) -> str:
        r = new_request(self._store, "GET", "")
        r.apply(options)
        if not r.base_url:
            raise MissingConfigError(
                "base url is required. either set it as default or pass it as an option"
            )
        return strip_api_suffix(r.base_url)

    def link(self, asset_id: str, *options: Option) -> str:
        """Build the public link of an asset. No request is made."""
        return f"{self._root_url(options)}/assets/link/{quote(asset_id, safe='')}"

    def upload_link(self, path: str, *options: Option) -> str:
        """
        Build the direct URL of an uploaded file. No request is made.

        Args:
            path: File path as found in the asset's ``path`` field
        """
        return f"{self._root_url(options)}/storage/uploads/{quote(path.lstrip('/'))}"
