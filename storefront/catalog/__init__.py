"""Product Catalog.

Category reference data, the product table, read-side catalog queries,
product mutations and product photos.
"""

from storefront.catalog.models import MAX_PHOTO_BYTES, Category, Product
from storefront.catalog.mutations import PhotoUpload, ProductInput, ProductMutationService
from storefront.catalog.photos import Photo, PhotoService
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.service import CatalogService, CategoryProducts, ProductFilter

__all__ = [
    # Models
    "Category",
    "MAX_PHOTO_BYTES",
    "Product",
    # Repository
    "CategoryRepository",
    "ProductRepository",
    # Services
    "CatalogService",
    "CategoryProducts",
    "ProductFilter",
    "ProductMutationService",
    "ProductInput",
    "PhotoUpload",
    "PhotoService",
    "Photo",
]
