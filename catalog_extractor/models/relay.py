"""
Relay and store configuration models.

Both are frozen: they are loaded once from config/ and never mutated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote, urlsplit

from ..common.constants import DEFAULT_RELAY_TIMEOUT_MS
from ..common.text_utils import category_path_from_url


class ResponseShape(Enum):
    """How a relay returns the upstream response."""
    WRAPPED = "wrapped"  # JSON envelope: {"status": {"http_code": ...}, "contents": "..."}
    RAW = "raw"          # Upstream body passed through untouched


@dataclass(frozen=True)
class RelayDescriptor:
    """
    One relay proxy in the fallback chain.

    endpoint_template placeholders:
        {url}      target URL, percent-encoded
        {raw_url}  target URL as-is
    """
    name: str
    endpoint_template: str
    response_shape: ResponseShape = ResponseShape.RAW
    timeout_ms: int = DEFAULT_RELAY_TIMEOUT_MS

    def build_url(self, target_url: str) -> str:
        return self.endpoint_template.format(
            url=quote(target_url, safe=''),
            raw_url=target_url,
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class StoreConfig:
    """A merchant whose catalog can be scanned."""
    key: str
    name: str
    base_url: str
    default_link: str = ""
    sales_channel: Optional[int] = 1

    @property
    def domain(self) -> str:
        host = urlsplit(self.base_url).netloc.lower()
        return host[4:] if host.startswith("www.") else host

    @property
    def default_category_path(self) -> str:
        return category_path_from_url(self.default_link)

    def category_path(self, link: Optional[str]) -> str:
        """Category path of a pasted link, falling back to the store default."""
        return category_path_from_url(link, default=self.default_category_path)
