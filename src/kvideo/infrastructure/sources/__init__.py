from .maccms_client import HttpxVideoSourceClient
from .registry import ConfigSourceRegistry

__all__ = ["ConfigSourceRegistry", "HttpxVideoSourceClient"]
