from slugkit.services.slugging import SlugService, compute_slug
from slugkit.services.uniqueness import build_query, resolve_unique_slug

__all__ = ["SlugService", "build_query", "compute_slug", "resolve_unique_slug"]
