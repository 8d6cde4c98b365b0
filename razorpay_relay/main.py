import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_LEVEL, Settings
from .errors import ErrorEnvelopeMiddleware, OriginGate, unhandled_exception_handler
from .gateway import GatewayConfigError, RazorpayGateway
from .metrics import MetricsMiddleware, router as metrics_router
from .routes import router as api_router


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)-7s | %(name)s:%(lineno)d - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, gateway: RazorpayGateway | None = None) -> FastAPI:
    """Build the relay app.

    The gateway client is created during startup unless one is passed in.
    A client that cannot be built (missing credentials) aborts startup.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s (policy=%s, production=%s)",
                    settings.service_name, settings.amount_policy, settings.production)
        if gateway is None:
            try:
                app.state.gateway = RazorpayGateway.from_settings(settings)
            except GatewayConfigError as exc:
                logger.critical("Razorpay client init failed: %s", exc)
                raise
        yield
        if gateway is None:
            await app.state.gateway.aclose()
        logger.info("%s stopped", settings.service_name)

    app = FastAPI(
        title="Razorpay Order Relay",
        description="Creates Razorpay orders on behalf of the web client",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    if gateway is not None:
        app.state.gateway = gateway

    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(ErrorEnvelopeMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    # wraps CORS so rejected origins never get CORS headers
    app.add_middleware(OriginGate, allowed_origins=settings.allowed_origins)
    app.add_middleware(MetricsMiddleware)

    app.include_router(metrics_router)
    app.include_router(api_router)
    return app


app = create_app()
