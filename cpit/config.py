"""
Configuration for the Cockpit client.

Two layers live here:

- ``DefaultStore``: the in-memory defaults (session, base URL, API key,
  debug mode, timeout) every request starts from. The module keeps one
  process-wide store used by the module-level API; clients can also get a
  private store built from a ``CockpitConfig``.
- ``ConfigManager``: persisted settings for the command line tool, read from
  a JSON file and overridden by ``CPIT_*`` environment variables.
"""

import json
import logging
import os
import threading
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional, Dict, Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_CONFIG_DIR = Path.home() / ".cpit"
CONFIG_FILE_NAME = "config.json"

ENV_BASE_URL = "CPIT_BASEURL"
ENV_API_KEY = "CPIT_APIKEY"
ENV_DEBUG = "CPIT_DEBUG"
ENV_TIMEOUT = "CPIT_TIMEOUT"
ENV_CONFIG_DIR = "CPIT_CONFIG_DIR"

API_SUFFIX = "/api"


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes from a base URL."""
    return url.rstrip("/")


def strip_api_suffix(url: str) -> str:
    """Return the site root for a base URL such as ``https://cms.example.com/api``."""
    url = normalize_base_url(url)
    if url.endswith(API_SUFFIX):
        url = url[:-len(API_SUFFIX)]
    return url


@dataclass
class CockpitConfig:
    """Connection settings for a Cockpit instance."""

    base_url: str = ""
    api_key: str = ""
    debug: bool = False
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def __post_init__(self):
        self.base_url = normalize_base_url(self.base_url or "")

    def is_configured(self) -> bool:
        """Check whether both base URL and API key are set."""
        return bool(self.base_url and self.api_key)

    @property
    def root_url(self) -> str:
        """Base URL without the ``/api`` suffix, used for asset links."""
        return strip_api_suffix(self.base_url)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CockpitConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ReadWriteLock:
    """
    Reader/writer lock preferring writers.

    Any number of readers may hold the lock together. A waiting writer stops
    new readers from entering, so a steady stream of readers cannot keep
    setters waiting forever.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    def read(self) -> "_Guard":
        return _Guard(self.acquire_read, self.release_read)

    def write(self) -> "_Guard":
        return _Guard(self.acquire_write, self.release_write)


class _Guard:
    def __init__(self, acquire, release):
        self._acquire = acquire
        self._release = release

    def __enter__(self) -> None:
        self._acquire()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._release()


@dataclass(frozen=True)
class Defaults:
    """Immutable snapshot of a DefaultStore."""

    session: Optional[requests.Session]
    base_url: str
    api_key: str
    debug: bool
    timeout: Optional[float]


class DefaultStore:
    """
    Thread-safe holder of request defaults.

    Setters take the write lock, ``snapshot()`` takes the read lock, so a
    snapshot always reflects a fully applied sequence of setter calls.
    """

    def __init__(self, config: Optional[CockpitConfig] = None):
        self._lock = ReadWriteLock()
        self._session: Optional[requests.Session] = None
        self._base_url = ""
        self._api_key = ""
        self._debug = False
        self._timeout: Optional[float] = None
        if config is not None:
            self.apply_config(config)

    @classmethod
    def from_config(cls, config: CockpitConfig) -> "DefaultStore":
        return cls(config)

    @classmethod
    def from_defaults(cls, defaults: "Defaults") -> "DefaultStore":
        """Create a separate store holding a copy of a snapshot."""
        store = cls()
        store._session = defaults.session
        store._base_url = defaults.base_url
        store._api_key = defaults.api_key
        store._debug = defaults.debug
        store._timeout = defaults.timeout
        return store

    def set_session(self, session: Optional[requests.Session]) -> None:
        """Set the requests session used for calls (None: shared default session)."""
        with self._lock.write():
            self._session = session

    def set_base_url(self, url: str) -> None:
        """Set the API base URL, e.g. ``https://cms.example.com/api``."""
        url = normalize_base_url(url)
        with self._lock.write():
            self._base_url = url

    def set_api_key(self, key: str) -> None:
        with self._lock.write():
            self._api_key = key

    def set_debug_mode(self, enabled: bool) -> None:
        with self._lock.write():
            self._debug = enabled

    def set_timeout(self, timeout: Optional[float]) -> None:
        with self._lock.write():
            self._timeout = timeout

    def apply_config(self, config: CockpitConfig) -> None:
        """Replace base URL, API key, debug mode and timeout in one step."""
        base_url = normalize_base_url(config.base_url)
        with self._lock.write():
            self._base_url = base_url
            self._api_key = config.api_key
            self._debug = config.debug
            self._timeout = config.timeout

    def snapshot(self) -> Defaults:
        with self._lock.read():
            return Defaults(
                session=self._session,
                base_url=self._base_url,
                api_key=self._api_key,
                debug=self._debug,
                timeout=self._timeout,
            )


# Process-wide defaults used by the module-level API
_default_store = DefaultStore()


def get_default_store() -> DefaultStore:
    """Get the process-wide default store."""
    return _default_store


def set_default_session(session: Optional[requests.Session]) -> None:
    """Set the default requests session used for calls."""
    _default_store.set_session(session)


def set_default_base_url(url: str) -> None:
    """Set the default base URL used for calls."""
    _default_store.set_base_url(url)


def set_default_api_key(key: str) -> None:
    """Set the default API key used for calls."""
    _default_store.set_api_key(key)


def set_default_debug_mode(enabled: bool) -> None:
    """Enable or disable debug logging of requests by default."""
    _default_store.set_debug_mode(enabled)


def set_default_timeout(timeout: Optional[float]) -> None:
    """Set the default request timeout in seconds (None: wait forever)."""
    _default_store.set_timeout(timeout)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """
    Manages persisted configuration.

    Settings are stored as JSON in ``<config_dir>/config.json``. Environment
    variables take precedence over the file:

    - CPIT_BASEURL: API base URL
    - CPIT_APIKEY: API key
    - CPIT_DEBUG: enable request debug logging
    - CPIT_TIMEOUT: request timeout in seconds
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            env_dir = os.environ.get(ENV_CONFIG_DIR)
            config_dir = Path(env_dir) if env_dir else DEFAULT_CONFIG_DIR
        self.config_dir = Path(config_dir)
        self._config: Optional[CockpitConfig] = None

    def get_config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def load(self) -> CockpitConfig:
        """Load configuration from file and environment."""
        data: Dict[str, Any] = {}
        path = self.get_config_path()

        if path.exists():
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not read config file {path}: {e}")
                data = {}

        config = CockpitConfig.from_dict(data)
        self._apply_env(config)
        self._config = config
        return config

    def _apply_env(self, config: CockpitConfig) -> None:
        base_url = os.environ.get(ENV_BASE_URL)
        if base_url:
            config.base_url = normalize_base_url(base_url)

        api_key = os.environ.get(ENV_API_KEY)
        if api_key:
            config.api_key = api_key

        debug = os.environ.get(ENV_DEBUG)
        if debug is not None:
            config.debug = _env_bool(debug)

        timeout = os.environ.get(ENV_TIMEOUT)
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_TIMEOUT} value: {timeout!r}")

    def save(self, config: CockpitConfig) -> None:
        """Write configuration to the config file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_config_path()

        with open(path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)

        # The file holds the API key
        try:
            os.chmod(path, 0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions of {path}")

        self._config = config

    def get(self) -> CockpitConfig:
        """Get the current configuration, loading it on first use."""
        if self._config is None:
            return self.load()
        return self._config

    def update(self, **kwargs: Any) -> CockpitConfig:
        """Update and persist individual settings."""
        config = self.get()
        for key, value in kwargs.items():
            if not hasattr(config, key):
                raise AttributeError(f"Unknown configuration key: {key}")
            setattr(config, key, value)
        config.base_url = normalize_base_url(config.base_url)
        self.save(config)
        return config

    def clear(self) -> None:
        """Remove the config file."""
        path = self.get_config_path()
        if path.exists():
            path.unlink()
        self._config = None


_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get the shared config manager (a new one when config_dir is given)."""
    global _config_manager
    if config_dir is not None:
        return ConfigManager(config_dir)
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> CockpitConfig:
    """Get the persisted configuration."""
    return get_config_manager().get()
