from importlib.metadata import PackageNotFoundError, version
import logging
import platform
from typing import Dict, Optional


LOG = logging.getLogger(__name__)


def get_version() -> Optional[str]:
    """
    Get the version of the gameasure package.

    Returns:
      Optional[str]: The gameasure version if found, otherwise None.
    """
    try:
        return version("gameasure")
    except PackageNotFoundError:
        LOG.debug("Unable to get gameasure version.")
        return None


def get_user_agent() -> str:
    """
    Get the user agent string for HTTP requests.

    Returns:
      str: The user agent string in the format: gameasure/{version} ({os} {arch}; Python/{python_version})
    """
    gameasure_version = get_version() or "unknown"
    os_name = platform.system()

    machine = platform.machine()
    # Normalize architecture names
    if machine in ("x86_64", "AMD64"):
        arch = "x86_64"
    elif machine in ("arm64", "aarch64"):
        arch = "arm_64"
    elif machine == "i386":
        arch = "x86"
    else:
        arch = machine or "unknown"

    python_version = platform.python_version()

    return f"gameasure/{gameasure_version} ({os_name} {arch}; Python/{python_version})"


def get_meta_http_headers() -> Dict[str, str]:
    """
    Get the headers sent with every hit request.

    The collection endpoint must never be served from a cache, so every
    request also carries the cache-bypassing directives.

    Returns:
      Dict[str, str]: The metadata headers.
    """
    return {
        "User-Agent": get_user_agent(),
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }
