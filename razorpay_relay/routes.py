from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from datetime import datetime, timezone
import logging, math

from .config import Settings
from .gateway import GatewayFailure, RazorpayGateway
from .schemas import ApiResponse, ErrorInfo, OrderRequest, OrderSummary

logger = logging.getLogger(__name__)
router = APIRouter()

MIN_AMOUNT_INR = 1
AMOUNT_ERROR = "Amount must be at least 1 INR"


def to_minor_units(amount: float, policy: str = "strict") -> int:
    """Rupees -> paise. ``strict`` rejects amounts below 1 INR, ``clamp`` raises them to 1."""
    if policy == "clamp":
        amount = max(amount, MIN_AMOUNT_INR)
    elif amount < MIN_AMOUNT_INR:
        raise ValueError(AMOUNT_ERROR)
    return math.floor(amount) * 100


def get_gateway(request: Request) -> RazorpayGateway:
    return request.app.state.gateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    return {
        "status": "Server is running",
        "service": settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health", response_class=PlainTextResponse, include_in_schema=False)
async def health_check():
    return "OK"


@router.head("/health", include_in_schema=False)
async def health_check_head():
    return Response(status_code=status.HTTP_200_OK)


# =================== Razorpay order ===================
@router.post("/create-order")
async def create_order(
    request: Request,
    gateway: RazorpayGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
):
    # pydantic's ValidationError and json decode errors are both ValueErrors
    try:
        order_in = OrderRequest.model_validate(await request.json())
        amount_minor = to_minor_units(order_in.amount, settings.amount_policy)
    except ValueError:
        body = ApiResponse(success=False, error=AMOUNT_ERROR)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.to_json())

    result = await gateway.create_order(amount_minor)

    if isinstance(result, GatewayFailure):
        error = ErrorInfo(
            code=result.status_code,
            message=result.description,
            details=None if settings.production else result.details,
        )
        body = ApiResponse(success=False, error=error)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.to_json())

    order = OrderSummary.model_validate(result.order)
    logger.info("Order %s created for %s paise", order.id, order.amount)
    return ApiResponse(success=True, order=order).to_json()
