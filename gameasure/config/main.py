import configparser
import logging
import os
from pathlib import Path
from typing import Callable, Mapping, NamedTuple, Optional, TypeVar, Union

from gameasure.constants import (
    BATCH_URL,
    COLLECT_URL,
    CONFIG,
    FLUSH_DELAY,
    REQUEST_TIMEOUT,
)

from .log_codes import (
    ENGINE_RESOLVED,
    ENGINE_VALUE_INVALID,
    PROXY_INVALID,
    PROXY_RESOLVED,
)

logger = logging.getLogger(__name__)

ENGINE_SECTION_NAME = "engine"
ENDPOINT_KEY = "endpoint"
SINGLE_ENDPOINT_KEY = "single_endpoint"
FLUSH_DELAY_KEY = "flush_delay"
TIMEOUT_KEY = "timeout"

PROXY_SECTION_NAME = "proxy"
PROXY_PROTOCOL_KEY = "protocol"
PROXY_HOST_KEY = "host"
PROXY_PORT_KEY = "port"
DEFAULT_PROXY_PORT = 80
PROXY_ALLOWED_PROTOCOLS = ("http", "https")

ENV_ENDPOINT = "GAMEASURE_ENDPOINT"
ENV_SINGLE_ENDPOINT = "GAMEASURE_SINGLE_ENDPOINT"
ENV_FLUSH_DELAY = "GAMEASURE_FLUSH_DELAY"
ENV_REQUEST_TIMEOUT = "GAMEASURE_REQUEST_TIMEOUT"
ENV_PROXY = "GAMEASURE_PROXY"

T = TypeVar("T")


class EngineConfig(NamedTuple):
    """
    Settings an engine is constructed with.

    Args:
        endpoint (str): URL batches are posted to.
        single_endpoint (str): URL single hits are posted to.
        flush_delay (float): Debounce window in seconds.
        timeout (float): Request timeout in seconds.
        proxy (Optional[str]): Proxy URL every request goes through.
    """

    endpoint: str = BATCH_URL
    single_endpoint: str = COLLECT_URL
    flush_delay: float = FLUSH_DELAY
    timeout: float = REQUEST_TIMEOUT
    proxy: Optional[str] = None

    def as_dict(self) -> dict[str, Union[str, float, None]]:
        return {
            ENDPOINT_KEY: self.endpoint,
            SINGLE_ENDPOINT_KEY: self.single_endpoint,
            FLUSH_DELAY_KEY: self.flush_delay,
            TIMEOUT_KEY: self.timeout,
            PROXY_SECTION_NAME: self.proxy,
        }


def _non_negative_float(raw: Union[str, float], key: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.error(ENGINE_VALUE_INVALID, extra={"key": key, "value": raw})
        raise ValueError(f"{key} must be a number, got {raw!r}")

    if value < 0:
        logger.error(ENGINE_VALUE_INVALID, extra={"key": key, "value": raw})
        raise ValueError(f"{key} must not be negative, got {raw!r}")

    return value


def _first(*candidates: Optional[T]) -> Optional[T]:
    for candidate in candidates:
        if candidate is not None and candidate != "":
            return candidate
    return None


def _read_section(config: configparser.ConfigParser, name: str) -> dict[str, str]:
    if not config.has_section(name):
        return {}

    return dict(config[name])


def proxy_url(
    host: Optional[str],
    port: Optional[Union[str, int]] = None,
    protocol: Optional[str] = None,
) -> Optional[str]:
    """
    Build the proxy URL handed to the HTTP client.

    Returns:
        Optional[str]: ``protocol://host:port``, or None when no host is set.

    Raises:
        ValueError: If a port or protocol is given without a host, the
            protocol is not http(s) or the port is not an integer.
    """
    if not host or not host.strip():
        if port or protocol:
            logger.error(PROXY_INVALID, extra={"reason": "missing host"})
            raise ValueError("Proxy host must be provided when using other proxy options.")
        return None

    scheme = (protocol or "http").lower()
    if scheme not in PROXY_ALLOWED_PROTOCOLS:
        logger.error(PROXY_INVALID, extra={"reason": "protocol", "value": scheme})
        raise ValueError(f"Invalid proxy protocol: {scheme!r}")

    try:
        port_value = int(port) if port else DEFAULT_PROXY_PORT
    except ValueError:
        logger.error(PROXY_INVALID, extra={"reason": "port", "value": port})
        raise ValueError("Proxy port must be an integer")

    return f"{scheme}://{host.strip()}:{port_value}"


def get_engine_config(
    endpoint: Optional[str] = None,
    single_endpoint: Optional[str] = None,
    flush_delay: Optional[float] = None,
    timeout: Optional[float] = None,
    proxy_host: Optional[str] = None,
    proxy_port: Optional[str] = None,
    proxy_protocol: Optional[str] = None,
    config_path: Path = CONFIG,
    getenv: Callable[[str], Optional[str]] = os.getenv,
) -> EngineConfig:
    """
    Resolve the engine configuration.

    Resolution order per setting (first value wins):
      1. Explicit arguments (command-line options)
      2. Environment variables
      3. The [engine] and [proxy] sections of config.ini
      4. Built-in defaults (no proxy)

    Raises:
        ValueError: If a numeric setting is not a non-negative number or the
            proxy settings are invalid.
    """
    parser = configparser.ConfigParser()
    parser.read(filenames=[config_path])
    engine: Mapping[str, str] = _read_section(parser, ENGINE_SECTION_NAME)
    proxy: Mapping[str, str] = _read_section(parser, PROXY_SECTION_NAME)
    defaults = EngineConfig()

    raw_delay = _first(flush_delay, getenv(ENV_FLUSH_DELAY), engine.get(FLUSH_DELAY_KEY))
    raw_timeout = _first(timeout, getenv(ENV_REQUEST_TIMEOUT), engine.get(TIMEOUT_KEY))

    resolved_proxy = _first(
        proxy_url(proxy_host, proxy_port, proxy_protocol),
        getenv(ENV_PROXY),
        proxy_url(
            proxy.get(PROXY_HOST_KEY),
            proxy.get(PROXY_PORT_KEY),
            proxy.get(PROXY_PROTOCOL_KEY),
        ),
    )
    if resolved_proxy:
        logger.info(PROXY_RESOLVED, extra={"proxy": resolved_proxy})

    config = EngineConfig(
        endpoint=_first(endpoint, getenv(ENV_ENDPOINT), engine.get(ENDPOINT_KEY))
        or defaults.endpoint,
        single_endpoint=_first(
            single_endpoint,
            getenv(ENV_SINGLE_ENDPOINT),
            engine.get(SINGLE_ENDPOINT_KEY),
        )
        or defaults.single_endpoint,
        flush_delay=defaults.flush_delay
        if raw_delay is None
        else _non_negative_float(raw_delay, FLUSH_DELAY_KEY),
        timeout=defaults.timeout
        if raw_timeout is None
        else _non_negative_float(raw_timeout, TIMEOUT_KEY),
        proxy=resolved_proxy,
    )

    logger.info(ENGINE_RESOLVED, extra={"config_path": str(config_path)})
    return config
