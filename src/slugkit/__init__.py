"""slugkit.

Generate URL-safe slugs from record fields and keep them unique
within a persisted collection.
"""

from slugkit.core.config import SlugConfig, load_config
from slugkit.models import Entity, ExistenceQuery, Record
from slugkit.services import SlugService, compute_slug, resolve_unique_slug

__version__ = "0.1.0"
__all__ = [
    "Entity",
    "ExistenceQuery",
    "Record",
    "SlugConfig",
    "SlugService",
    "__version__",
    "compute_slug",
    "load_config",
    "resolve_unique_slug",
]
