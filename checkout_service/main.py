from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from http import HTTPStatus
import logging
import uvicorn

# Use relative imports
from . import config, errors, models, schemas
from .crud import (
    CheckoutRepository,
    DiscountsRepository,
    InMemoryCheckoutRepository,
    InMemoryDiscountsRepository,
    InMemoryProductsRepository,
    ProductsRepository,
)
from .logic import CheckoutService, ProductsService

# Basic logging setup
logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
logger = logging.getLogger(__name__)

# HTTP status for each error kind; anything else derived from CheckoutError is a bad request.
# 422 comes from HTTPStatus since starlette renamed its constant.
ERROR_STATUS_CODES = {
    errors.ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    errors.DiscountRuleNotFoundError: status.HTTP_404_NOT_FOUND,
    errors.InvalidDiscountQuantityError: HTTPStatus.UNPROCESSABLE_ENTITY,
    errors.InvalidDiscountPriceError: HTTPStatus.UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Checkout Service starting up...")
    logger.info(f"Listening on {config.APP_HOST}:{config.APP_PORT}")
    logger.info(f"Unit conversion enabled: {app.state.checkout_service.unit_conversion_enabled}")
    yield
    logger.info("Checkout Service shutting down...")


def get_checkout_service(request: Request) -> CheckoutService:
    """FastAPI dependency to inject the pricing engine."""
    return request.app.state.checkout_service


def get_products_service(request: Request) -> ProductsService:
    return request.app.state.products_service


async def checkout_error_handler(request: Request, exc: errors.CheckoutError):
    status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    logger.warning(f"{request.method} {request.url.path} failed with {exc.error_code}: {exc.message}")
    body = schemas.ErrorResponse(error_code=exc.error_code, detail=exc.message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


router = APIRouter(prefix="/api/checkout")


@router.get("/products", response_model=schemas.ProductListResponse, tags=["Products"], summary="List Products")
async def list_products(products_service: ProductsService = Depends(get_products_service)):
    return schemas.ProductListResponse(products=products_service.get_all_products())


@router.get("/products/{sku}", response_model=models.Product, tags=["Products"], summary="Get Product")
async def read_product(sku: int, products_service: ProductsService = Depends(get_products_service)):
    """Retrieves a single product by SKU."""
    return products_service.get_product(sku)


@router.get("/units", response_model=schemas.MeasurementUnitsResponse, tags=["Products"], summary="List Measurement Units")
async def list_units(products_service: ProductsService = Depends(get_products_service)):
    return schemas.MeasurementUnitsResponse(units=products_service.get_measurement_units())


@router.get("/discounts", response_model=schemas.DiscountRuleListResponse, tags=["Discounts"], summary="List Discount Rules")
async def list_discount_rules(checkout_service: CheckoutService = Depends(get_checkout_service)):
    return schemas.DiscountRuleListResponse(discount_rules=checkout_service.get_discount_rules())


@router.get("/checkout", response_model=schemas.CheckoutResponse, tags=["Checkout"], summary="Get Checkout")
async def read_checkout(checkout_service: CheckoutService = Depends(get_checkout_service)):
    """
    Returns every item in the checkout together with the total price,
    recomputed from the items on each call.
    """
    try:
        checkout = checkout_service.get_checkout()
    except errors.CheckoutError:
        raise
    except Exception as e:
        logger.exception(f"Error calculating checkout total: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during total calculation."
        )
    return schemas.CheckoutResponse(items=checkout.items, total_price=checkout.total_price)


@router.post(
    "/items",
    response_model=models.CheckoutItem,
    status_code=status.HTTP_201_CREATED,
    tags=["Checkout"],
    summary="Add Item To Checkout"
)
async def add_item(request_data: schemas.AddItemRequest, checkout_service: CheckoutService = Depends(get_checkout_service)):
    """Adds a quantity of a product, in any unit of its family, to the checkout."""
    logger.info(f"Received add request for SKU {request_data.sku}: {request_data.quantity} {request_data.buy_unit}")
    return checkout_service.add_item_to_checkout(
        request_data.sku,
        request_data.quantity,
        buy_unit=request_data.buy_unit,
        discount_rule_ref=request_data.discount_rule_id,
    )


@router.delete("/items/{item_id}", response_model=schemas.DeleteItemResponse, tags=["Checkout"], summary="Delete Checkout Item")
async def delete_item(item_id: int, checkout_service: CheckoutService = Depends(get_checkout_service)):
    deleted = checkout_service.delete_item_from_checkout(item_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Checkout item not found")
    return schemas.DeleteItemResponse(id=item_id, deleted=True)


def create_app(
    products_repo: ProductsRepository | None = None,
    discounts_repo: DiscountsRepository | None = None,
    checkout_repo: CheckoutRepository | None = None,
    unit_conversion_enabled: bool = config.UNIT_CONVERSION_ENABLED,
) -> FastAPI:
    """Build the service with its own repositories (in-memory unless given)."""
    products_repo = products_repo if products_repo is not None else InMemoryProductsRepository()
    discounts_repo = discounts_repo if discounts_repo is not None else InMemoryDiscountsRepository()
    checkout_repo = checkout_repo if checkout_repo is not None else InMemoryCheckoutRepository()

    app = FastAPI(
        title="Checkout Service",
        description="Prices supermarket checkouts with unit conversion and discount rules.",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.products_service = ProductsService(products_repo)
    app.state.checkout_service = CheckoutService(
        checkout_repo,
        products_repo,
        discounts_repo,
        unit_conversion_enabled=unit_conversion_enabled,
    )
    app.add_exception_handler(errors.CheckoutError, checkout_error_handler)

    @app.get("/health", tags=["Monitoring"], summary="Health Check")
    async def health_check():
        """Basic health check endpoint."""
        return {"status": "healthy"}

    app.include_router(router)
    return app


app = create_app()


def run():
    uvicorn.run(app, host=config.APP_HOST, port=config.APP_PORT)
