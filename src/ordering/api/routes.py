"""FastAPI routes for the Transactions API.

Callers are authenticated upstream; the gateway forwards the user's id in the
``X-User-Id`` header and the engine trusts it. Routes are plain functions so
FastAPI runs them on its worker threads: the engine blocks on reservation
locks and must not hold the event loop while it waits.
"""

from fastapi import APIRouter, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ordering.api.schemas import (
    CreateOrderRequest,
    MaterialResponse,
    OrderResponse,
    RegisterMaterialRequest,
    UpdateStatusRequest,
)
from ordering.domain import logger
from ordering.engine import get_engine
from ordering.errors import InvalidInput, OrderingError

# ---------------------------------------------------------------------------
# Transactions Router
# ---------------------------------------------------------------------------
transaction_router = APIRouter(prefix="/transactions", tags=["transactions"])


@transaction_router.get("", response_model=list[OrderResponse])
def list_transactions(
    role: str = Query(default="all"),
    x_user_id: str = Header(...),
) -> list[OrderResponse]:
    orders = get_engine().get_user_orders(x_user_id, role=role)
    return [OrderResponse.from_order(order) for order in orders]


@transaction_router.post("", status_code=201, response_model=OrderResponse)
def create_transaction(body: CreateOrderRequest, x_user_id: str = Header(...)) -> OrderResponse:
    order = get_engine().create_order(
        material_id=body.material_id,
        buyer_id=x_user_id,
        quantity=body.quantity,
        total_amount=body.total_amount,
        currency=body.currency,
    )
    return OrderResponse.from_order(order)


@transaction_router.get("/{order_id}", response_model=OrderResponse)
def get_transaction(order_id: str, x_user_id: str = Header(...)) -> OrderResponse:
    order = get_engine().get_order(order_id, requesting_user_id=x_user_id)
    return OrderResponse.from_order(order)


@transaction_router.put("/{order_id}/status", response_model=OrderResponse)
def update_transaction_status(
    order_id: str,
    body: UpdateStatusRequest,
    x_user_id: str = Header(...),
) -> OrderResponse:
    order = get_engine().update_status(order_id, body.status, requesting_user_id=x_user_id)
    return OrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Materials Router (ledger seeding by the catalogue service)
# ---------------------------------------------------------------------------
material_router = APIRouter(prefix="/materials", tags=["materials"])


@material_router.post("", status_code=201, response_model=MaterialResponse)
def register_material(body: RegisterMaterialRequest) -> MaterialResponse:
    material = get_engine().register_material(
        seller_id=body.seller_id,
        available_quantity=body.available_quantity,
        unit=body.unit,
        title=body.title,
        material_id=body.material_id,
    )
    return MaterialResponse.from_material(material)


@material_router.get("/{material_id}", response_model=MaterialResponse)
def get_material(material_id: str) -> MaterialResponse:
    return MaterialResponse.from_material(get_engine().get_material(material_id))


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
def _ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    logger.info(
        "Request failed",
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]} for error in exc.errors()
    ]
    return _ordering_error_handler(request, InvalidInput("Invalid request", errors=errors))


def register_error_handlers(app: FastAPI) -> None:
    """Render every engine error as ``{"error": {"code", "message"}}`` with its status code.

    Malformed bodies, headers and query parameters are reported as ``INVALID_INPUT``.
    """
    app.add_exception_handler(OrderingError, _ordering_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
