"""API clients for external services.

Each client follows the same pattern:
- Accepts API key(s) in __init__
- Exposes an `is_available` property (True when key is set)
- Degrades to failure results instead of raising when unconfigured
- Uses httpx.AsyncClient for HTTP calls
"""

from aigos.clients.firecrawl import FirecrawlClient

__all__ = ["FirecrawlClient"]
