"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventdesk.auth import routes as auth_routes
from eventdesk.checklists import routes as checklist_routes
from eventdesk.config import settings
from eventdesk.dashboard import routes as dashboard_routes
from eventdesk.database import init_db
from eventdesk.events import routes as event_routes
from eventdesk.middleware import setup_rate_limiting
from eventdesk.partners import routes as partner_routes
from eventdesk.payments import routes as payment_routes

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        await init_db()
    logger.info("EventDesk API started")
    yield


# Create FastAPI app
app = FastAPI(
    title="EventDesk API",
    description="Event management - events, checklists and financial dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting (per owner, or per address when unauthenticated)
setup_rate_limiting(app)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 with field-level detail."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation Error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log the failure server-side and return a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


# Include routers
app.include_router(auth_routes.router, prefix=settings.API_V1_PREFIX, tags=["Session"])
app.include_router(dashboard_routes.router, prefix=f"{settings.API_V1_PREFIX}/dashboard", tags=["Dashboard"])
app.include_router(checklist_routes.router, prefix=f"{settings.API_V1_PREFIX}/checklists", tags=["Checklists"])
app.include_router(event_routes.router, prefix=f"{settings.API_V1_PREFIX}/eventos", tags=["Eventos"])
app.include_router(partner_routes.router, prefix=settings.API_V1_PREFIX, tags=["Contratantes & Fornecedores"])
app.include_router(payment_routes.router, prefix=settings.API_V1_PREFIX, tags=["Pagamentos"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "EventDesk API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "eventdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
