"""
Transport configuration.

One APIConfig is shared by a provider and its AsyncTransport. API calls
and part uploads get separate timeout budgets: JSON calls are short,
while a single 10 MiB part PUT may take minutes on a slow link.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Union
import ssl

import aiohttp


@dataclass
class ProxyConfig:
    """HTTP(S) proxy applied to every request, API calls and part PUTs alike."""
    url: str
    username: Optional[str] = None
    password: Optional[str] = None

    def request_kwargs(self) -> Dict[str, Any]:
        """Per-request kwargs for ``aiohttp.ClientSession.request``."""
        kwargs: Dict[str, Any] = {'proxy': self.url}
        if self.username:
            kwargs['proxy_auth'] = aiohttp.BasicAuth(self.username, self.password or '')
        return kwargs


@dataclass
class TimeoutConfig:
    """
    Timeout budgets in seconds.

    ``total`` and ``sock_read`` bound API calls. ``chunk_total`` bounds one
    part upload and has no read timeout, since the body is still streaming.
    """
    total: float = 60.0
    connect: float = 30.0
    sock_read: float = 60.0
    chunk_total: float = 600.0

    def api_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read
        )

    def part_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.chunk_total, connect=self.connect)


@dataclass
class APIConfig:
    """
    Provider transport configuration.

    Attributes:
        api_url: Vendor API root; providers fill it from their vendor profile when unset
        user_agent: User-Agent sent with every request
        proxy: Optional proxy
        verify_ssl: Verify server certificates
        ca_file: Extra CA bundle for certificate verification
        timeout: Timeout budgets
        extra_headers: Headers added to every request
        limit_per_host: Connection pool size per host
    """
    api_url: Optional[str] = None
    user_agent: str = 'cloudkit/1.0.0'
    proxy: Optional[ProxyConfig] = None
    verify_ssl: bool = True
    ca_file: Optional[str] = None
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    limit_per_host: int = 10

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'APIConfig':
        """Create configuration routed through ``proxy_url``."""
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    def endpoint(self, path: str) -> str:
        """Absolute URL of an API path under ``api_url``."""
        if not self.api_url:
            raise ValueError("api_url is not set")
        return f"{self.api_url.rstrip('/')}/{path.lstrip('/')}"

    def ssl_context(self) -> Union[ssl.SSLContext, bool]:
        if not self.verify_ssl:
            return False
        return ssl.create_default_context(cafile=self.ca_file)

    def connector_kwargs(self) -> Dict[str, Any]:
        """Kwargs for ``aiohttp.TCPConnector``."""
        return {
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl_context(),
        }

    def session_kwargs(self) -> Dict[str, Any]:
        """Kwargs for ``aiohttp.ClientSession``."""
        return {
            'headers': {'User-Agent': self.user_agent, **self.extra_headers},
            'timeout': self.timeout.api_timeout(),
        }

    def request_kwargs(self) -> Dict[str, Any]:
        """Kwargs added to every request."""
        return self.proxy.request_kwargs() if self.proxy else {}
