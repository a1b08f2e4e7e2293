from .settings import config, load_config

__all__ = ["config", "load_config"]
