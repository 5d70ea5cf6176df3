"""
FastAPI application initialization for the client portal analytics API.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.core.settings import settings
from portal.routes.analytics import router as analytics_router


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Client Portal Risk Analytics API",
    description="Loss-ratio, trend and ranking analytics for insurance policies and claims",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(analytics_router)


@app.get("/health")
def health():
    """
    Application health check endpoint.
    """
    return {"status": "healthy", "service": "portal_analytics"}
