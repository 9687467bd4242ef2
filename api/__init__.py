"""
Module 05 - Certificate Verification API (FastAPI)

HTTP API over the verification engine:
- POST /verify/document - Check an uploaded PDF against a document hash
- POST /verify/fields - Check field values + proofs against a root
- GET /certificates/{ticker}/{nonce} - Anchored metadata and issuer tier
- POST /certificates/{ticker}/{nonce}/verify - Full certificate check
- GET /issuers - Issuer registry
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
