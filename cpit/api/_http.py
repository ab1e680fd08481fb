"""
Request pipeline for the Cockpit API.

A CockpitRequest is created from a snapshot of the defaults, mutated by
options, then executed. Handles:
- Request body encoding
- URL and query string assembly
- The HTTP call and debug logging (the API key is never logged)
- Status interpretation and typed decoding of the response
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union, IO, MutableMapping
from urllib.parse import urlencode

import pydantic
import requests
from pydantic import TypeAdapter
from pydantic_core import to_jsonable_python

from ..config import DefaultStore
from ..exceptions import (
    MissingConfigError,
    MissingBodyError,
    EncodingError,
    TransportError,
    NotFoundError,
    UnexpectedStatusError,
    DecodeError,
)

logger = logging.getLogger(__name__)

# Cockpit API paths
PATH_GET_IMAGE = "/assets/image/{id}"
PATH_GET_ASSET = "/assets/{id}"
PATH_GET_SINGLETON = "/content/item/{model}"
PATH_UPSERT_ITEM = "/content/item/{model}"
PATH_GET_ITEM = "/content/item/{model}/{id}"
PATH_DELETE_ITEM = "/content/item/{model}/{id}"
PATH_GET_ITEMS = "/content/items/{model}"

API_KEY_HEADER = "Api-Key"
MUTATING_METHODS = ("POST", "PUT", "PATCH")

_default_session: Optional[requests.Session] = None
_default_session_lock = threading.Lock()


def get_default_session() -> requests.Session:
    """Get the session used when no session was injected."""
    global _default_session
    with _default_session_lock:
        if _default_session is None:
            _default_session = requests.Session()
            _default_session.headers.update({"Accept": "application/json"})
        return _default_session


def _to_jsonable(value: Any) -> Any:
    return to_jsonable_python(value, by_alias=True)


@dataclass(frozen=True)
class RawBody:
    """Pre-encoded body sent as is (bytes, text or a readable stream)."""
    content: Union[bytes, str, IO[bytes]]

    def encode(self) -> Union[bytes, IO[bytes]]:
        if isinstance(self.content, str):
            return self.content.encode("utf-8")
        return self.content


@dataclass(frozen=True)
class JsonBody:
    """Structured value encoded as compact JSON when the request is built."""
    value: Any

    def encode(self) -> bytes:
        try:
            text = json.dumps(
                self.value,
                separators=(",", ":"),
                ensure_ascii=False,
                default=_to_jsonable,
            )
        except (TypeError, ValueError) as e:
            raise EncodingError(f"failed to encode body: {e}") from e
        return text.encode("utf-8")


Body = Union[RawBody, JsonBody]


@dataclass
class CockpitRequest:
    """A request in progress. Owned by a single call."""

    method: str = "GET"
    path: str = ""
    session: Optional[requests.Session] = None
    api_key: str = ""
    base_url: str = ""
    params: Dict[str, List[str]] = field(default_factory=dict)
    body: Optional[Body] = None
    debug: bool = False
    timeout: Optional[float] = None
    output_headers: Optional[MutableMapping[str, str]] = None

    def set_param(self, key: str, value: str) -> None:
        """Replace all values of a query parameter."""
        self.params[key] = [value]

    def has_param(self, key: str) -> bool:
        return bool(self.params.get(key))

    def apply(self, options) -> "CockpitRequest":
        """Apply options in order; the first failing option stops the rest."""
        for option in options:
            option(self)
        return self

    @property
    def query_string(self) -> str:
        return urlencode(sorted(self.params.items()), doseq=True)

    @property
    def url(self) -> str:
        url = f"{self.base_url}{self.path}"
        query = self.query_string
        if query:
            url = f"{url}?{query}"
        return url

    def encode_body(self) -> Optional[Union[bytes, IO[bytes]]]:
        if self.body is None:
            return None
        return self.body.encode()

    def _get_headers(self, with_body: bool) -> Dict[str, str]:
        headers = {API_KEY_HEADER: self.api_key}
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _redact(self, text: str) -> str:
        if self.api_key:
            text = text.replace(self.api_key, "***")
        return text

    def _log_debug(
        self,
        url: str,
        response: Optional[requests.Response],
        error: Optional[BaseException]
    ) -> None:
        """Emit one debug record for the call. Headers are not part of it."""
        if error is not None:
            status = "ERROR"
            body = str(error)
        elif response is not None:
            status = f"{response.status_code} {response.reason or ''}".strip()
            # .text reads the body into response.content, which stays available
            body = response.text
        else:
            return
        logger.debug(f"[Cockpit][{status}] {self.method} {url} | {self._redact(body)}")

    def execute(self) -> requests.Response:
        """
        Perform the HTTP call and return the raw response.

        The caller owns the response and must close it.
        """
        if not self.api_key:
            raise MissingConfigError(
                "api key is required. either set it as default or pass it as an option"
            )
        if not self.base_url:
            raise MissingConfigError(
                "base url is required. either set it as default or pass it as an option"
            )

        session = self.session or get_default_session()
        data = self.encode_body()

        if self.method in MUTATING_METHODS and not data:
            raise MissingBodyError(f"body is required for {self.method} {self.path}")

        url = self.url
        try:
            response = session.request(
                method=self.method,
                url=url,
                data=data,
                headers=self._get_headers(data is not None),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            if self.debug:
                self._log_debug(url, None, e)
            error = self._redact(str(e))
            raise TransportError(f"Request failed: {error}", original=e, details=error) from e

        if self.debug:
            self._log_debug(url, response, None)

        return response

    def _check_status(self, response: requests.Response) -> None:
        if response.status_code == 200:
            return
        body = response.text
        if response.status_code == 404:
            raise NotFoundError(
                f"Resource not found: {self.method} {self.path}",
                status_code=404,
                response_data=body
            )
        raise UnexpectedStatusError(response.status_code, response.reason or "", body)

    def _copy_headers(self, response: requests.Response) -> None:
        if self.output_headers is not None:
            self.output_headers.clear()
            self.output_headers.update(response.headers)

    def run(self, output_type: Any = Any) -> Any:
        """
        Execute the request and decode the JSON response into output_type.

        output_type may be anything pydantic can validate (dict, list of
        models, a pydantic model, a dataclass). None skips decoding.
        """
        response = self.execute()
        with response:
            self._check_status(response)
            self._copy_headers(response)

            if output_type is None:
                return None

            try:
                return TypeAdapter(output_type).validate_json(response.content)
            except pydantic.ValidationError as e:
                raise DecodeError(
                    f"failed to decode response of {self.method} {self.path}: {e}",
                    details=response.text
                ) from e

    def run_raw(self) -> str:
        """Execute the request and return the response body as text."""
        response = self.execute()
        with response:
            self._check_status(response)
            self._copy_headers(response)
            return response.text


def new_request(store: DefaultStore, method: str, path: str) -> CockpitRequest:
    """Create a request from a snapshot of the store's defaults."""
    defaults = store.snapshot()
    return CockpitRequest(
        method=method,
        path=path,
        session=defaults.session,
        api_key=defaults.api_key,
        base_url=defaults.base_url,
        debug=defaults.debug,
        timeout=defaults.timeout,
    )
