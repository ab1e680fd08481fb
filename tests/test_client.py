"""
Tests for the client facade and module-level operations.
"""

import json
from typing import Optional

import pytest
import requests
import responses

import cpit
from cpit.api import (
    CockpitClient,
    with_api_key,
    with_base_url,
    with_data,
    with_limit,
    with_mime,
    with_populate,
    with_raw_body,
    with_resize_mode,
    with_skip,
    with_width,
)
from cpit.config import CockpitConfig, DefaultStore
from cpit.exceptions import (
    MissingBodyError,
    MissingConfigError,
    NotFoundError,
    UnexpectedStatusError,
    ValidationError,
)
from cpit.models import CockpitModel, File, PaginatedResponse, State

from .conftest import API_KEY, BASE_URL

POSTS = [
    {"_id": "p1", "title": "First", "_state": 1},
    {"_id": "p2", "title": "Second", "_state": 0},
]


class Post(CockpitModel):
    title: str
    summary: Optional[str] = None


class TestListItems:
    """Tests for listing items."""

    def test_paginated_response(self, client, mocked):
        """Test decoding the paginated envelope."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/content/items/posts",
            json={"data": POSTS, "meta": {"total": 42}},
        )

        page = client.list_items("posts", with_limit(10), with_skip(0))

        assert isinstance(page, PaginatedResponse)
        assert page.total == 42
        assert [p["_id"] for p in page.data] == ["p1", "p2"]
        assert mocked.calls[0].request.url == f"{BASE_URL}/content/items/posts?limit=10&skip=0"

    def test_bare_list_response(self, client, mocked):
        """Test wrapping a bare list."""
        mocked.add(responses.GET, f"{BASE_URL}/content/items/posts", json=POSTS)

        page = client.list_items("posts", with_limit(10))

        assert isinstance(page, PaginatedResponse)
        assert page.total is None
        assert len(page.data) == 2

    def test_skip_without_limit_expects_bare_list(self, client, mocked):
        """Test skip alone does not expect the envelope."""
        mocked.add(responses.GET, f"{BASE_URL}/content/items/posts", json=POSTS)

        page = client.list_items("posts", with_skip(5))

        assert page.total is None
        assert len(page.data) == 2

    def test_item_type(self, client, mocked):
        """Test decoding items into a model."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/content/items/posts",
            json={"data": POSTS, "meta": {"total": 2}},
        )

        page = client.list_items("posts", with_limit(2), with_skip(0), item_type=Post)

        assert all(isinstance(p, Post) for p in page.data)
        assert page.data[0].title == "First"
        assert page.data[0].state == State.PUBLISHED
        assert page.data[0].is_published
        assert not page.data[1].is_published

    def test_envelope_when_bare_list_expected(self, client, mocked):
        """Test envelope returned where a list was expected."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/content/items/posts",
            json={"data": POSTS, "meta": {"total": 2}},
        )
        with pytest.raises(cpit.DecodeError):
            client.list_items("posts")

    def test_invalid_option_makes_no_request(self, client, mocked):
        """Test invalid option stops the call."""
        with pytest.raises(ValidationError):
            client.list_items("posts", with_limit(0))
        assert len(mocked.calls) == 0

    def test_model_name_escaped(self, client, mocked):
        """Test escaping the model name."""
        mocked.add(responses.GET, f"{BASE_URL}/content/items/my%20posts", json=[])
        client.list_items("my posts")
        assert mocked.calls[0].request.url == f"{BASE_URL}/content/items/my%20posts"


class TestItems:
    """Tests for singletons and single items."""

    def test_get_singleton(self, client, mocked):
        """Test getting a singleton."""
        mocked.add(responses.GET, f"{BASE_URL}/content/item/settings", json={"siteName": "Blog"})
        assert client.get_singleton("settings") == {"siteName": "Blog"}

    def test_get_item(self, client, mocked):
        """Test getting an item with options."""
        mocked.add(responses.GET, f"{BASE_URL}/content/item/posts/p1", json=POSTS[0])

        post = client.get_item("posts", "p1", with_populate(True), output_type=Post)

        assert post.id == "p1"
        assert post.title == "First"
        assert mocked.calls[0].request.url.endswith("/content/item/posts/p1?populate=1")

    def test_get_item_not_found(self, client, mocked):
        """Test missing item."""
        mocked.add(responses.GET, f"{BASE_URL}/content/item/posts/nope", status=404)
        with pytest.raises(NotFoundError):
            client.get_item("posts", "nope")

    def test_server_error(self, client, mocked):
        """Test unexpected status."""
        mocked.add(responses.GET, f"{BASE_URL}/content/item/posts/p1", body="boom", status=500)
        with pytest.raises(UnexpectedStatusError) as exc_info:
            client.get_item("posts", "p1")
        assert exc_info.value.status_code == 500


class TestUpsert:
    """Tests for creating and updating items."""

    def test_data_wrapped_in_envelope(self, client, mocked):
        """Test data sent inside the data envelope."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={"_id": "new", "title": "A"})

        item = client.upsert_item("posts", {"title": "A"})

        assert item == {"_id": "new", "title": "A"}
        request = mocked.calls[0].request
        assert request.body == b'{"data":{"title":"A"}}'
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Api-Key"] == API_KEY

    def test_model_sent_with_aliases(self, client, mocked):
        """Test sending a model by alias."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={"_id": "p1", "title": "B"})

        saved = client.upsert_item("posts", Post(_id="p1", title="B"), output_type=Post)

        sent = json.loads(mocked.calls[0].request.body)
        assert sent["data"]["_id"] == "p1"
        assert sent["data"]["title"] == "B"
        assert saved.title == "B"

    def test_with_data_option(self, client, mocked):
        """Test body from with_data."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={})
        client.upsert_item("posts", None, with_data({"title": "C"}))
        assert mocked.calls[0].request.body == b'{"data":{"title":"C"}}'

    def test_raw_body_sent_verbatim(self, client, mocked):
        """Test raw body sent as is."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={})
        client.upsert_item("posts", None, with_raw_body('{"data": {"title": "D"}}'))
        assert mocked.calls[0].request.body == b'{"data": {"title": "D"}}'

    def test_body_option_without_data(self, client, mocked):
        """Test body option given in place of data."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={"_id": "new"})

        item = client.upsert_item("posts", with_data({"title": "C"}), with_limit(1))

        assert item == {"_id": "new"}
        request = mocked.calls[0].request
        assert request.body == b'{"data":{"title":"C"}}'
        assert request.url.endswith("?limit=1")

    def test_raw_body_option_without_data(self, client, mocked):
        """Test raw body option given in place of data."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={})
        client.upsert_item("posts", with_raw_body(b'{"data":{}}'))
        assert mocked.calls[0].request.body == b'{"data":{}}'

    def test_missing_body(self, client, mocked):
        """Test upsert without body."""
        with pytest.raises(MissingBodyError):
            client.upsert_item("posts")
        assert len(mocked.calls) == 0


class TestDelete:
    """Tests for deleting items."""

    def test_delete(self, client, mocked):
        """Test deleting an item."""
        mocked.add(responses.DELETE, f"{BASE_URL}/content/item/posts/p1", body="")

        assert client.delete_item("posts", "p1") is None
        assert mocked.calls[0].request.body is None

    def test_delete_not_found(self, client, mocked):
        """Test deleting a missing item."""
        mocked.add(responses.DELETE, f"{BASE_URL}/content/item/posts/p1", status=404)
        with pytest.raises(NotFoundError):
            client.delete_item("posts", "p1")


class TestAssets:
    """Tests for assets, images and links."""

    def test_get_asset(self, client, mocked):
        """Test decoding asset metadata."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/assets/a1",
            json={
                "_id": "a1",
                "_hash": "abc",
                "path": "/2024/01/logo.png",
                "mime": "image/png",
                "size": 2048,
                "width": 64,
                "height": 32,
                "colors": ["#ffffff"],
            },
        )

        asset = client.get_asset("a1")

        assert isinstance(asset, File)
        assert asset.hash == "abc"
        assert asset.width == 64
        assert asset.colors == ["#ffffff"]

    def test_get_image(self, client, mocked):
        """Test image URL with resize options."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/assets/image/a1",
            body="https://cms.example.com/storage/thumbs/a1.webp",
        )

        url = client.get_image("a1", with_resize_mode("thumbnail"), with_width(300), with_mime("webp"))

        assert url == "https://cms.example.com/storage/thumbs/a1.webp"
        assert mocked.calls[0].request.url == f"{BASE_URL}/assets/image/a1?m=thumbnail&mime=webp&w=300"

    def test_asset_link(self, client):
        """Test asset link."""
        assert client.asset_link("a1") == "https://cms.example.com/assets/link/a1"

    def test_upload_link(self, client):
        """Test upload link."""
        assert client.upload_link("/2024/01/logo.png") == (
            "https://cms.example.com/storage/uploads/2024/01/logo.png"
        )

    def test_link_with_base_url_override(self, client):
        """Test link with another base URL."""
        link = client.asset_link("a1", with_base_url("https://other.example.com/api/"))
        assert link == "https://other.example.com/assets/link/a1"

    def test_link_requires_base_url(self):
        """Test link without base URL."""
        with pytest.raises(MissingConfigError):
            CockpitClient(store=DefaultStore()).asset_link("a1")


class TestClientConfiguration:
    """Tests for client construction."""

    def test_client_without_config_uses_process_defaults(self, mocked):
        """Test client on process-wide defaults."""
        cpit.set_default_base_url(BASE_URL + "/")
        cpit.set_default_api_key(API_KEY)
        mocked.add(responses.GET, f"{BASE_URL}/content/item/settings", json={})

        CockpitClient().get_singleton("settings")

        assert mocked.calls[0].request.headers["Api-Key"] == API_KEY

    def test_client_config_does_not_touch_process_defaults(self, config):
        """Test instance config stays local."""
        CockpitClient(config)
        assert cpit.get_default_store().snapshot().api_key == ""

    def test_client_session_does_not_touch_process_defaults(self):
        """Test injected session stays local."""
        cpit.set_default_base_url(BASE_URL)
        cpit.set_default_api_key(API_KEY)
        session = requests.Session()

        client = CockpitClient(session=session)

        assert cpit.get_default_store().snapshot().session is None
        assert client.store is not cpit.get_default_store()
        defaults = client.store.snapshot()
        assert defaults.session is session
        assert defaults.base_url == BASE_URL
        assert defaults.api_key == API_KEY

    def test_session_only_client_closes_its_session(self):
        """Test closing a session-only client."""
        session = requests.Session()
        closed = []
        session.close = lambda: closed.append(True)

        with CockpitClient(session=session):
            pass

        assert closed == [True]

    def test_session_only_client_uses_its_session(self, mocked):
        """Test session-only client sends through its session."""
        cpit.set_default_base_url(BASE_URL)
        cpit.set_default_api_key(API_KEY)
        session = requests.Session()
        session.headers["X-Client"] = "local"
        mocked.add(responses.GET, f"{BASE_URL}/content/item/settings", json={})

        CockpitClient(session=session).get_singleton("settings")

        assert mocked.calls[0].request.headers["X-Client"] == "local"

    def test_per_call_overrides(self, client, mocked):
        """Test per-call base URL and API key."""
        mocked.add(responses.GET, "https://other.example.com/api/content/item/settings", json={})

        client.get_singleton(
            "settings",
            with_base_url("https://other.example.com/api/"),
            with_api_key("other-key"),
        )

        assert mocked.calls[0].request.headers["Api-Key"] == "other-key"

    def test_missing_config(self):
        """Test call without configuration."""
        with pytest.raises(MissingConfigError):
            CockpitClient().get_singleton("settings")

    def test_shared_store(self, mocked):
        """Test clients sharing a store."""
        store = DefaultStore()
        first = CockpitClient(store=store)
        second = CockpitClient(CockpitConfig(base_url=BASE_URL, api_key=API_KEY), store=store)
        mocked.add(responses.GET, f"{BASE_URL}/content/item/settings", json={})

        first.get_singleton("settings")

        assert first.store is second.store

    def test_context_manager_closes_injected_session(self, config):
        """Test closing the injected session."""
        session = requests.Session()
        closed = []
        session.close = lambda: closed.append(True)

        with CockpitClient(config, session=session):
            pass

        assert closed == [True]


class TestModuleLevelOperations:
    """Tests for the module-level API bound to process-wide defaults."""

    @pytest.fixture(autouse=True)
    def defaults(self, isolated_defaults):
        cpit.set_default_base_url(BASE_URL)
        cpit.set_default_api_key(API_KEY)

    def test_get_items(self, mocked):
        """Test listing items."""
        mocked.add(
            responses.GET,
            f"{BASE_URL}/content/items/posts",
            json={"data": POSTS, "meta": {"total": 42}},
        )
        page = cpit.get_items("posts", cpit.with_limit(10), cpit.with_skip(0))
        assert page.total == 42

    def test_upsert_and_delete(self, mocked):
        """Test upsert then delete."""
        mocked.add(responses.POST, f"{BASE_URL}/content/item/posts", json={"_id": "p9"})
        mocked.add(responses.DELETE, f"{BASE_URL}/content/item/posts/p9", json={})

        item = cpit.upsert_item("posts", {"title": "A"})
        cpit.delete_item("posts", item["_id"])

        assert [c.request.method for c in mocked.calls] == ["POST", "DELETE"]

    def test_get_singleton_and_item(self, mocked):
        """Test singleton and item."""
        mocked.add(responses.GET, f"{BASE_URL}/content/item/settings", json={"a": 1})
        mocked.add(responses.GET, f"{BASE_URL}/content/item/posts/p1", json=POSTS[0])

        assert cpit.get_singleton("settings") == {"a": 1}
        assert cpit.get_item("posts", "p1")["title"] == "First"

    def test_assets(self, mocked):
        """Test asset operations."""
        mocked.add(responses.GET, f"{BASE_URL}/assets/a1", json={"_id": "a1"})
        mocked.add(responses.GET, f"{BASE_URL}/assets/image/a1", body="/storage/a1.png")

        assert cpit.get_asset("a1").id == "a1"
        assert cpit.get_image("a1") == "/storage/a1.png"
        assert cpit.asset_link("a1") == "https://cms.example.com/assets/link/a1"
        assert cpit.upload_link("x.png") == "https://cms.example.com/storage/uploads/x.png"
