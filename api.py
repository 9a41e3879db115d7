"""
FastAPI application for the chemical vendor price lookup.

Exposes the lookup pipeline as a REST API: one GET endpoint takes a compound
identifier and returns one result per configured vendor.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List
import uvicorn
import os

from chemprice.agent import aggregate
from chemprice.catalog import get_catalog
from chemprice.config import get_settings
from chemprice.errors import PriceLookupError
from chemprice.logger_config import get_logger
from chemprice.registry import VENDORS, strategy_counts
from chemprice.schema import ErrorResponse, VendorResult

logger = get_logger("api")
settings = get_settings()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Vendor pricing for a chemical name, CAS number or SMILES string",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class VendorInfo(BaseModel):
    """A configured vendor and how it is priced."""
    display_name: str
    source_name: str
    strategy: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    services: dict


@app.exception_handler(PriceLookupError)
async def lookup_error_handler(request: Request, exc: PriceLookupError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    body = ErrorResponse(error=f"{exc.title}: {exc.message}", details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get("/", response_model=dict)
async def root():
    """Root endpoint with API information."""
    return {
        "message": settings.PROJECT_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "prices": "/prices/{identifier}"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint for monitoring and load balancers."""
    services = {
        "pubchem": settings.PUBCHEM_BASE_URL,
        "commerce_api": bool(settings.COMMERCE_API_BASE_URL),
        "catalog_entries": len(get_catalog()),
        "vendors": strategy_counts(),
    }

    return HealthResponse(
        status="healthy",
        services=services
    )


@app.get("/vendors", response_model=List[VendorInfo])
async def list_vendors():
    """Configured vendors in response order."""
    return [
        VendorInfo(
            display_name=vendor.display_name,
            source_name=vendor.source_name,
            strategy=vendor.strategy.value,
        )
        for vendor in VENDORS
    ]


@app.get(
    "/prices/{identifier:path}",
    response_model=List[VendorResult],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
def get_prices(identifier: str):
    """
    Price a compound at every configured vendor.

    The identifier is resolved to a PubChem CID (by name, then by SMILES),
    PubChem's vendor listing is fetched, and every configured vendor is
    priced concurrently. Each vendor reports success, not_found, link_only
    or error independently of the others.
    """
    result = aggregate(identifier)
    return result.vendors


@app.get("/examples", response_model=dict)
async def get_examples():
    """Example identifiers for testing."""
    return {
        "examples": [
            {"kind": "name", "identifier": "aspirin"},
            {"kind": "cas", "identifier": "50-78-2"},
            {"kind": "smiles", "identifier": "CC(=O)OC1=CC=CC=C1C(=O)O"},
            {"kind": "name", "identifier": "Eucalyptol"},
            {"kind": "cas", "identifier": "872-50-4"}
        ]
    }


if __name__ == "__main__":
    # Development server
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "api:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info"
    )
