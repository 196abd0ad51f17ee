"""
Shopfront Service Package.

Presentation-layer shell for the demo store app: screen view models built
from store API data, with local product search and cart totals.
"""

__version__ = "1.0.0"
__description__ = "Backend-for-frontend for the demo store app"

from .config import settings

__all__ = [
    "settings",
    "__version__",
]
