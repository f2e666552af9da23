from typing import List
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.database.manager import DatabaseManager
from framework.exceptions.handler import BadRequestException, NotFoundException
from framework.logging.logger import get_logger
from ..models import Product, ProductCreate, ProductRead, ProductUpdate
from ..unit_of_work import ProductUnitOfWork

router = APIRouter()

async def get_db():
    """Get database session (one per request)."""
    manager = DatabaseManager.get_instance()
    async for session in manager.sql.get_session():
        yield session

def get_uow(
    db: AsyncSession = Depends(get_db)
) -> ProductUnitOfWork:
    """Dependency: create ProductUnitOfWork."""
    return ProductUnitOfWork(session=db)

def _not_found(product_id: int) -> NotFoundException:
    return NotFoundException(f"Product {product_id} not found")

@router.get("", response_model=List[ProductRead])
async def get_products(uow: ProductUnitOfWork = Depends(get_uow)):
    """List all products."""
    products = await uow.products_repository.get_all()
    return [ProductRead.from_entity(p) for p in products]

@router.get("/{product_id}", name="get_product", response_model=ProductRead)
async def get_product(product_id: int, uow: ProductUnitOfWork = Depends(get_uow)):
    """Get one product; 404 when absent."""
    product = await uow.products_repository.find(product_id)
    if product is None:
        raise _not_found(product_id)
    return ProductRead.from_entity(product)

@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductRead)
async def post_product(
    payload: ProductCreate,
    request: Request,
    response: Response,
    uow: ProductUnitOfWork = Depends(get_uow)
):
    """Create a product; the store assigns its id."""
    product = uow.products_repository.insert(Product(**payload.model_dump()))
    await uow.commit()
    get_logger("products", request).info(f"Product {product.id} created")
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return ProductRead.from_entity(product)

@router.put("/{product_id}", response_model=ProductRead)
async def put_product(
    product_id: int,
    payload: ProductUpdate,
    request: Request,
    uow: ProductUnitOfWork = Depends(get_uow)
):
    """Replace a product; path and body ids must match."""
    if payload.id != product_id:
        raise BadRequestException(f"Path id {product_id} does not match body id {payload.id}")

    repository = uow.products_repository
    product = await repository.update(Product(**payload.model_dump()))
    try:
        await uow.commit()
    except StaleDataError:
        await uow.rollback()
        if not await repository.exists_by_id(product_id):
            raise _not_found(product_id)
        raise

    get_logger("products", request).info(f"Product {product_id} updated to version {product.row_version}")
    return ProductRead.from_entity(product)

@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: int,
    request: Request,
    uow: ProductUnitOfWork = Depends(get_uow)
):
    """Delete a product; 404 when absent."""
    deleted = await uow.products_repository.delete_by_id(product_id)
    if not deleted:
        raise _not_found(product_id)
    await uow.commit()
    get_logger("products", request).info(f"Product {product_id} deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
