"""
Module 05 - FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import AppServices, build_services
from api.errors import (
    APIError,
    api_error_handler,
    engine_error_handler,
    generic_error_handler,
)
from api.routes import certificates, health, issuers, verify
from core.schemas.errors import CertProofException


# Configure logging - respects CERTPROOF_LOG_LEVEL env var, defaulting to INFO
logging.basicConfig(
    level=getattr(logging, os.getenv("CERTPROOF_LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app(services: AppServices | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        services: Prebuilt collaborators. Built from the runtime config
            when omitted; tests inject their own (e.g. a mock ledger).
    """

    app = FastAPI(
        title="CertProof API",
        description="""
HTTP API for verifying ledger-anchored academic certificates.

## Endpoints

- **POST /verify/document** - Check an uploaded PDF against a document hash
- **POST /verify/fields** - Check field values + Merkle proofs against a root
- **GET /certificates/{ticker}/{nonce}** - Anchored metadata and issuer tier
- **POST /certificates/{ticker}/{nonce}/verify** - Verify PDF and/or fields
- **GET /issuers** - Issuer trust registry
- **GET /health** - Health check

## Outcomes

Every field verdict is `matched`, `mismatch` or `error`. A mismatch means
the value or proof does not reproduce the anchored root; an error means
the input could not be evaluated at all.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.services = services or build_services()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(CertProofException, engine_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(verify.router)
    app.include_router(certificates.router)
    app.include_router(issuers.router)

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
