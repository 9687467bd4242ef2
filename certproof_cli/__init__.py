"""
Module 06 - CertProof CLI

Command-line interface for certificate verification.

Usage:
    python -m certproof_cli hash certificate.pdf
    python -m certproof_cli verify-document certificate.pdf --expected-hash <hex>
    python -m certproof_cli verify-field name "Alice" --proof name.json --root <hex>
    python -m certproof_cli verify --nft KCERT-TEST/1 --pdf certificate.pdf
    python -m certproof_cli issuers
"""

__version__ = "0.1.0"
