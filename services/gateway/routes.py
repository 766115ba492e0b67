from dataclasses import dataclass

from shared.config.settings import Settings


@dataclass(frozen=True)
class RouteEntry:
    path_prefix: str
    upstream_base_url: str
    timeout: float

    def __post_init__(self):
        if not self.path_prefix.startswith("/"):
            raise ValueError(f"Route prefix must start with '/': {self.path_prefix!r}")
        if self.timeout <= 0:
            raise ValueError(f"Route timeout must be positive: {self.timeout!r}")
        object.__setattr__(self, "path_prefix", self.path_prefix.rstrip("/") or "/")
        object.__setattr__(self, "upstream_base_url", self.upstream_base_url.rstrip("/"))

    def matches(self, path: str) -> bool:
        # Match on segment boundaries: /api/menu must not catch /api/menus
        if self.path_prefix == "/":
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    def target_url(self, path: str) -> str:
        rest = path if self.path_prefix == "/" else path[len(self.path_prefix):]
        return self.upstream_base_url + rest


class RouteTable:
    """Read-only after construction. Longest matching prefix wins."""

    def __init__(self, entries: list[RouteEntry]):
        self._entries = tuple(sorted(entries, key=lambda e: len(e.path_prefix), reverse=True))

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def match(self, path: str) -> RouteEntry | None:
        for entry in self._entries:
            if entry.matches(path):
                return entry
        return None

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouteTable":
        # Upstreams mount their APIs under the same prefix, so the stripped
        # path is appended to "<service url><prefix>"
        services = {
            "/api/auth": settings.auth_service_url,
            "/api/menu": settings.menu_service_url,
            "/api/orders": settings.order_service_url,
        }
        return cls(
            [
                RouteEntry(prefix, f"{url.rstrip('/')}{prefix}", settings.gateway_timeout_seconds)
                for prefix, url in services.items()
            ]
        )
