from .main import EngineConfig, get_engine_config, proxy_url

__all__ = [
    "EngineConfig",
    "get_engine_config",
    "proxy_url",
]
