"""
Module 04 - Certificate Verification

Orchestration of document hashing, leaf commitments and proof replay.
"""

from .service import CertificateVerificationService, DocumentSource

__all__ = [
    "CertificateVerificationService",
    "DocumentSource",
]
