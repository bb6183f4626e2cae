"""Product catalog API endpoints.

Provides endpoints for the catalog:
- POST /create-product - create a product (admin, multipart)
- PUT /update-product/{id} - update a product (admin, multipart)
- DELETE /delete-product/{id} - delete a product (admin)
- GET /getAll-products - newest 12 products
- GET /getsingle-product/{slug} - one product by slug
- GET /product-photo/{pid} - product photo bytes
- POST /product-filter - filter by categories and price range
- GET /product-category/{slug} - products of a category
- GET /product-count - approximate product count
- GET /product-list/{page} - page of 3 products
- GET /search/{keyword} - keyword search
- GET /related-product/{pid}/{cid} - related products
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.auth import AdminUser
from storefront.api.schemas import (
    AllProductsResponse,
    CategoryProductsResponse,
    DeletedProductResponse,
    ErrorResponse,
    ProductCountResponse,
    ProductFilterRequest,
    ProductResponse,
    ProductsResponse,
    SingleProductResponse,
    category_to_response,
    product_to_response,
)
from storefront.catalog.models import MAX_PHOTO_BYTES
from storefront.catalog.mutations import PhotoUpload, ProductInput, ProductMutationService
from storefront.catalog.photos import PhotoService
from storefront.catalog.service import CatalogService, ProductFilter
from storefront.infrastructure.database import get_session

router = APIRouter(prefix="/api/v1/product", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_catalog_service(session: SessionDep) -> CatalogService:
    """Get catalog query service."""
    return CatalogService(session)


def get_mutation_service(session: SessionDep) -> ProductMutationService:
    """Get product mutation service."""
    return ProductMutationService(session)


def get_photo_service(session: SessionDep) -> PhotoService:
    """Get product photo service."""
    return PhotoService(session)


CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]
MutationDep = Annotated[ProductMutationService, Depends(get_mutation_service)]


async def read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    """Read an uploaded photo.

    Reads at most one byte past the size limit so oversized uploads are
    still detected without buffering them whole.
    """
    if photo is None:
        return None
    data = await photo.read(MAX_PHOTO_BYTES + 1)
    if not data:
        return None
    return PhotoUpload(
        data=data,
        content_type=photo.content_type or "application/octet-stream",
    )


def _product_input(
    name: str | None,
    description: str | None,
    price: str | None,
    category: str | None,
    quantity: str | None,
    shipping: str | None,
    photo: PhotoUpload | None,
) -> ProductInput:
    return ProductInput(
        name=name,
        description=description,
        price=price,
        category=category,
        quantity=quantity,
        shipping=shipping,
        photo=photo,
    )


# ============================================================================
# Mutations
# ============================================================================


@router.post(
    "/create-product",
    response_model=SingleProductResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    admin: AdminUser,
    service: MutationDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    quantity: Annotated[str | None, Form()] = None,
    shipping: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File()] = None,
) -> SingleProductResponse:
    """Create a product from a multipart form."""
    fields = _product_input(
        name, description, price, category, quantity, shipping, await read_photo(photo)
    )
    product = await service.create(fields)
    await service.session.commit()
    return SingleProductResponse(
        message="Product Created Successfully",
        product=product_to_response(product),
    )


@router.put(
    "/update-product/{product_id}",
    response_model=SingleProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update product",
)
async def update_product(
    product_id: str,
    admin: AdminUser,
    service: MutationDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    quantity: Annotated[str | None, Form()] = None,
    shipping: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File()] = None,
) -> SingleProductResponse:
    """Replace a product's fields from a multipart form."""
    fields = _product_input(
        name, description, price, category, quantity, shipping, await read_photo(photo)
    )
    product = await service.update(product_id, fields)
    await service.session.commit()
    return SingleProductResponse(
        message="Product Updated Successfully",
        product=product_to_response(product),
    )


@router.delete(
    "/delete-product/{product_id}",
    response_model=DeletedProductResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    admin: AdminUser,
    service: MutationDep,
) -> DeletedProductResponse:
    """Delete a product; unknown IDs are not an error."""
    product = await service.delete(product_id)
    await service.session.commit()
    return DeletedProductResponse(
        message="Product Deleted Successfully",
        products=product_to_response(product) if product else None,
    )


# ============================================================================
# Queries
# ============================================================================


@router.get("/getAll-products", response_model=AllProductsResponse, summary="Newest products")
async def get_all_products(service: CatalogDep) -> AllProductsResponse:
    """Return the 12 newest products."""
    products = await service.list_all()
    return AllProductsResponse(
        message="All Products",
        count_total=len(products),
        products=[product_to_response(p) for p in products],
    )


@router.get(
    "/getsingle-product/{slug}",
    response_model=SingleProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product by slug",
)
async def get_single_product(slug: str, service: CatalogDep) -> SingleProductResponse:
    """Return one product by slug."""
    product = await service.get_by_slug(slug)
    return SingleProductResponse(
        message="Single Product Fetched",
        product=product_to_response(product),
    )


@router.get(
    "/product-photo/{product_id}",
    response_class=Response,
    responses={
        200: {"content": {"image/*": {}}},
        404: {"model": ErrorResponse},
    },
    summary="Get product photo",
)
async def get_product_photo(
    product_id: str,
    service: Annotated[PhotoService, Depends(get_photo_service)],
) -> Response:
    """Return the raw photo with its stored content type."""
    photo = await service.fetch(product_id)
    return Response(content=photo.data, media_type=photo.content_type)


@router.post(
    "/product-filter",
    response_model=ProductsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Filter products",
)
async def filter_products(
    body: ProductFilterRequest,
    service: CatalogDep,
) -> ProductsResponse:
    """Filter by category IDs and an inclusive price range."""
    products = await service.filter_products(
        ProductFilter(category_ids=body.checked, price_range=body.radio)
    )
    return ProductsResponse(products=[product_to_response(p) for p in products])


@router.get(
    "/product-category/{slug}",
    response_model=CategoryProductsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Products by category",
)
async def get_category_products(slug: str, service: CatalogDep) -> CategoryProductsResponse:
    """Return a category and all of its products."""
    result = await service.by_category_slug(slug)
    return CategoryProductsResponse(
        category=category_to_response(result.category),
        products=[product_to_response(p) for p in result.products],
    )


@router.get("/product-count", response_model=ProductCountResponse, summary="Count products")
async def get_product_count(service: CatalogDep) -> ProductCountResponse:
    """Return the approximate number of products."""
    return ProductCountResponse(total=await service.count())


@router.get(
    "/product-list/{page}",
    response_model=ProductsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List products by page",
)
async def list_products_page(page: str, service: CatalogDep) -> ProductsResponse:
    """Return one page of 3 products, newest first."""
    products = await service.list_page(page)
    return ProductsResponse(products=[product_to_response(p) for p in products])


@router.get(
    "/search/{keyword}",
    response_model=list[ProductResponse],
    responses={400: {"model": ErrorResponse}},
    summary="Search products",
)
async def search_products(keyword: str, service: CatalogDep) -> list[ProductResponse]:
    """Search product names and descriptions."""
    products = await service.search(keyword)
    return [product_to_response(p) for p in products]


@router.get(
    "/related-product/{product_id}/{category_id}",
    response_model=ProductsResponse,
    summary="Related products",
)
async def get_related_products(
    product_id: str,
    category_id: str,
    service: CatalogDep,
) -> ProductsResponse:
    """Return up to 4 other products from the same category."""
    products = await service.related(product_id, category_id)
    return ProductsResponse(products=[product_to_response(p) for p in products])
