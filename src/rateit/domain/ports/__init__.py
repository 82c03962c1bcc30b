from .catalog import CatalogClientPort

__all__ = ["CatalogClientPort"]
