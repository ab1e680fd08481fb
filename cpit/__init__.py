"""
cpit - Python client for the Cockpit headless CMS API.

Quick start:
    import cpit

    cpit.set_default_base_url("https://cms.example.com/api")
    cpit.set_default_api_key("API-...")

    page = cpit.get_items("posts", cpit.with_limit(10), cpit.with_skip(0))
    print(page.total, [post["title"] for post in page.data])
"""

__version__ = "0.3.0"
__prog_name__ = "cpit"

from .config import (
    CockpitConfig,
    DefaultStore,
    ConfigManager,
    get_config,
    get_config_manager,
    get_default_store,
    set_default_session,
    set_default_base_url,
    set_default_api_key,
    set_default_debug_mode,
    set_default_timeout,
)
from .exceptions import (
    CockpitError,
    ConfigError,
    MissingConfigError,
    ValidationError,
    EmptyValueError,
    MissingBodyError,
    EncodingError,
    TransportError,
    APIError,
    NotFoundError,
    UnexpectedStatusError,
    DecodeError,
)
from .models import State, CockpitModel, File, Meta, PaginatedResponse
from .api import *  # noqa: F401,F403
from .api import __all__ as _api_all

__all__ = [
    "__version__",
    "CockpitConfig",
    "DefaultStore",
    "ConfigManager",
    "get_config",
    "get_config_manager",
    "get_default_store",
    "set_default_session",
    "set_default_base_url",
    "set_default_api_key",
    "set_default_debug_mode",
    "set_default_timeout",
    "CockpitError",
    "ConfigError",
    "MissingConfigError",
    "ValidationError",
    "EmptyValueError",
    "MissingBodyError",
    "EncodingError",
    "TransportError",
    "APIError",
    "NotFoundError",
    "UnexpectedStatusError",
    "DecodeError",
    "State",
    "CockpitModel",
    "File",
    "Meta",
    "PaginatedResponse",
] + list(_api_all)
