"""HTTP transport and configuration shared by all providers."""
from .config import APIConfig, ProxyConfig, TimeoutConfig
from .transport import AsyncTransport, HTTPResult

__all__ = [
    'AsyncTransport',
    'HTTPResult',

    # Configuration
    'APIConfig',
    'ProxyConfig',
    'TimeoutConfig',
]
