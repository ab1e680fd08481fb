"""
Cockpit API Client - Main facade for all API operations.

The client provides both domain-specific sub-clients (client.content,
client.assets) and flat methods. Module-level functions at the bottom use
the process-wide defaults set with the ``set_default_*`` functions.
"""

from typing import Any, Optional

import requests

from ..config import CockpitConfig, DefaultStore, get_default_store
from ..models import File, PaginatedResponse
from .assets import AssetsAPI
from .content import ContentAPI
from .options import Option


class CockpitClient:
    """
    Client for a Cockpit CMS instance.

    Usage (process-wide defaults):
        set_default_base_url("https://cms.example.com/api")
        set_default_api_key("API-...")
        posts = CockpitClient().list_items("posts")

    Usage (instance configuration):
        client = CockpitClient(CockpitConfig(base_url=..., api_key=...))
        post = client.get_item("posts", "6501f...")
    """

    def __init__(
        self,
        config: Optional[CockpitConfig] = None,
        session: Optional[requests.Session] = None,
        store: Optional[DefaultStore] = None
    ):
        """
        Initialize the API client.

        Args:
            config: Optional configuration. Uses the process-wide defaults
                if neither config nor store is given.
            session: Optional requests session, kept in a store of this client
                (the process-wide defaults are left untouched)
            store: Optional store to share defaults between clients
        """
        if store is None:
            if config is not None:
                store = DefaultStore.from_config(config)
            elif session is not None:
                store = DefaultStore.from_defaults(get_default_store().snapshot())
            else:
                store = get_default_store()
        elif config is not None:
            store.apply_config(config)
        if session is not None:
            store.set_session(session)

        self._store = store

        self.content = ContentAPI(store)
        self.assets = AssetsAPI(store)

    @property
    def store(self) -> DefaultStore:
        """Get the defaults used by this client."""
        return self._store

    # ========== Content ==========

    def list_items(
        self,
        model: str,
        *options: Option,
        item_type: Any = dict
    ) -> PaginatedResponse:
        """List items of a model."""
        return self.content.list(model, *options, item_type=item_type)

    def get_singleton(self, model: str, *options: Option, output_type: Any = dict) -> Any:
        """Get a singleton."""
        return self.content.get_singleton(model, *options, output_type=output_type)

    def get_item(
        self,
        model: str,
        item_id: str,
        *options: Option,
        output_type: Any = dict
    ) -> Any:
        """Get an item by id."""
        return self.content.get(model, item_id, *options, output_type=output_type)

    def upsert_item(
        self,
        model: str,
        data: Optional[Any] = None,
        *options: Option,
        output_type: Any = dict
    ) -> Any:
        """Create or update an item."""
        return self.content.upsert(model, data, *options, output_type=output_type)

    def delete_item(self, model: str, item_id: str, *options: Option) -> None:
        """Delete an item."""
        self.content.delete(model, item_id, *options)

    # ========== Assets ==========

    def get_asset(self, asset_id: str, *options: Option, output_type: Any = File) -> Any:
        """Get asset metadata."""
        return self.assets.get(asset_id, *options, output_type=output_type)

    def get_image(self, asset_id: str, *options: Option) -> str:
        """Get the location of a rendered image."""
        return self.assets.get_image(asset_id, *options)

    def asset_link(self, asset_id: str, *options: Option) -> str:
        """Build the public link of an asset."""
        return self.assets.link(asset_id, *options)

    def upload_link(self, path: str, *options: Option) -> str:
        """Build the direct URL of an uploaded file."""
        return self.assets.upload_link(path, *options)

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the session injected into this client's own store."""
        if self._store is not get_default_store():
            session = self._store.snapshot().session
            if session is not None:
                session.close()

    def __enter__(self) -> "CockpitClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# Convenience function for quick API access
def get_client(config: Optional[CockpitConfig] = None) -> CockpitClient:
    """
    Get an API client instance.

    Args:
        config: Optional configuration

    Returns:
        CockpitClient instance
    """
    return CockpitClient(config)


def get_items(model: str, *options: Option, item_type: Any = dict) -> PaginatedResponse:
    """List items of a model using the process-wide defaults."""
    return CockpitClient().list_items(model, *options, item_type=item_type)


def get_singleton(model: str, *options: Option, output_type: Any = dict) -> Any:
    """Get a singleton using the process-wide defaults."""
    return CockpitClient().get_singleton(model, *options, output_type=output_type)


def get_item(model: str, item_id: str, *options: Option, output_type: Any = dict) -> Any:
    """Get an item using the process-wide defaults."""
    return CockpitClient().get_item(model, item_id, *options, output_type=output_type)


def upsert_item(
    model: str,
    data: Optional[Any] = None,
    *options: Option,
    output_type: Any = dict
) -> Any:
    """Create or update an item using the process-wide defaults."""
    return CockpitClient().upsert_item(model, data, *options, output_type=output_type)


def delete_item(model: str, item_id: str, *options: Option) -> None:
    """Delete an item using the process-wide defaults."""
    CockpitClient().delete_item(model, item_id, *options)


def get_asset(asset_id: str, *options: Option, output_type: Any = File) -> Any:
    """Get asset metadata using the process-wide defaults."""
    return CockpitClient().get_asset(asset_id, *options, output_type=output_type)


def get_image(asset_id: str, *options: Option) -> str:
    """Get the location of a rendered image using the process-wide defaults."""
    return CockpitClient().get_image(asset_id, *options)


def asset_link(asset_id: str, *options: Option) -> str:
    """Build the public link of an asset from the process-wide defaults."""
    return CockpitClient().asset_link(asset_id, *options)


def upload_link(path: str, *options: Option) -> str:
    """Build the direct URL of an uploaded file from the process-wide defaults."""
    return CockpitClient().upload_link(path, *options)
