"""
Cache key management.

Centralized cache key definitions to:
- Prevent key collisions
- Enable pattern-based invalidation
- Document cache structure
"""

import json
from collections.abc import Iterable


class CacheKeys:
    """
    Centralized cache key definitions.

    Naming convention: cache:{path}[?{query}]:{query as JSON}

    Examples:
        - cache:/api/orders:{} -> First page of orders
        - cache:/api/orders?city=Moscow:{"city":"Moscow"} -> Filtered orders
        - cache:/api/orders* -> Pattern matching every cached order response
    """

    PREFIX = "cache"

    # TTLs (in seconds)
    TTL_RESPONSE = 60 * 5     # 5 minutes
    TTL_DEFAULT = 60 * 60     # 1 hour

    @staticmethod
    def query_json(query_items: Iterable[tuple[str, str]]) -> str:
        """
        Serialize query parameters as a compact JSON object.

        Keys keep the order in which the client sent them, so
        ``?a=1&b=2`` and ``?b=2&a=1`` produce different strings.
        A repeated key collapses to a list of its values.
        """
        params: dict[str, str | list[str]] = {}
        for name, value in query_items:
            if name in params:
                existing = params[name]
                if isinstance(existing, list):
                    existing.append(value)
                else:
                    params[name] = [existing, value]
            else:
                params[name] = value
        return json.dumps(params, ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def response_key(
        cls,
        path: str,
        query_string: str = "",
        query_items: Iterable[tuple[str, str]] = (),
    ) -> str:
        """Cache key for a GET response, built from the full URL and its query."""
        url = f"{path}?{query_string}" if query_string else path
        return f"{cls.PREFIX}:{url}:{cls.query_json(query_items)}"

    @classmethod
    def resource_pattern(cls, path: str) -> str:
        """Pattern for every cached response under a resource path."""
        return f"{cls.PREFIX}:{path}*"
