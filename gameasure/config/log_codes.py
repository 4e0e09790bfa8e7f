"""
Log codes for configuration-related operations.
"""

CONFIG = "config"

# Engine Configuration
ENGINE = f"{CONFIG}.engine"
ENGINE_RESOLVED = f"{ENGINE}.resolved"
ENGINE_VALUE_INVALID = f"{ENGINE}.invalid_value"

# Proxy Configuration
PROXY = f"{CONFIG}.proxy"
PROXY_RESOLVED = f"{PROXY}.resolved"
PROXY_INVALID = f"{PROXY}.invalid"
