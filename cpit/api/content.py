"""
Content API - Items and singletons.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import quote

from ..config import DefaultStore
from ..models import PaginatedResponse
from ._http import (
    new_request,
    JsonBody,
    PATH_GET_ITEMS,
    PATH_GET_SINGLETON,
    PATH_GET_ITEM,
    PATH_UPSERT_ITEM,
    PATH_DELETE_ITEM,
)
from .options import Option

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class ContentAPI:
    """
    API for content items.

    Handles:
    - Listing items of a collection model (with pagination)
    - Singletons
    - Single items by id
    - Create/update (upsert) and delete
    """

    def __init__(self, store: DefaultStore):
        """
        Initialize Content API.

        Args:
            store: Defaults every request starts from
        """
        self._store = store

    def list(
        self,
        model: str,
        *options: Option,
        item_type: Any = dict
    ) -> PaginatedResponse:
        """
        List items of a model.

        Args:
            model: Model name
            *options: Request options (filter, sort, limit, skip, ...)
            item_type: Type each item is decoded into

        Returns:
            PaginatedResponse with the items. ``total`` is only set when both
            with_skip and with_limit were given, because only then Cockpit
            reports it.
        """
        r = new_request(self._store, "GET", PATH_GET_ITEMS.format(model=_segment(model)))
        r.apply(options)

        if r.has_param("skip") and r.has_param("limit"):
            return r.run(PaginatedResponse[item_type])

        items = r.run(List[item_type])
        return PaginatedResponse[item_type](data=items)

    def get_singleton(
        self,
        model: str,
        *options: Option,
        output_type: Any = dict
    ) -> Any:
        """
        Get a singleton.

        Args:
            model: Singleton model name
            *options: Request options (locale, fields, populate, ...)
            output_type: Type the singleton is decoded into (None: no decoding)
        """
        r = new_request(self._store, "GET", PATH_GET_SINGLETON.format(model=_segment(model)))
        return r.apply(options).run(output_type)

    def get(
        self,
        model: str,
        item_id: str,
        *options: Option,
        output_type: Any = dict
    ) -> Any:
        """
        Get an item by id.

        Args:
            model: Model name
            item_id: Item id
            *options: Request options (locale, fields, populate, ...)
            output_type: Type the item is decoded into (None: no decoding)

        Raises:
            NotFoundError: If the item does not exist
        """
        path = PATH_GET_ITEM.format(model=_segment(model), id=_segment(item_id))
        r = new_request(self._store, "GET", path)
        return r.apply(options).run(output_type)

    def upsert(
        self,
        model: str,
        data: Optional[Any] = None,
        *options: Option,
        output_type: Any = dict
    ) -> Any:
        """
        Create or update an item.

        An item is updated when data contains its ``_id``, created otherwise.

        Args:
            model: Model name
            data: Item fields, sent as ``{"data": data}``. May be omitted
                when the body is set with with_data or with_raw_body, e.g.
                ``upsert("posts", with_data({...}))``.
            *options: Request options
            output_type: Type the stored item is decoded into

        Returns:
            The created or updated item
        """
        if callable(data):
            # an option passed in place of data
            options = (data,) + options
            data = None

        r = new_request(self._store, "POST", PATH_UPSERT_ITEM.format(model=_segment(model)))
        if data is not None:
            r.body = JsonBody({"data": data})
        r.apply(options)

        logger.debug(f"Upsert {model} item")
        return r.run(output_type)

    def delete(self, model: str, item_id: str, *options: Option) -> None:
        """
        Delete an item.

        Args:
            model: Model name
            item_id: Item id
            *options: Request options
        """
        path = PATH_DELETE_ITEM.format(model=_segment(model), id=_segment(item_id))
        r = new_request(self._store, "DELETE", path)
        r.apply(options).run(None)
