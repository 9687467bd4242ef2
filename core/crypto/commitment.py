"""
Module 02 - Leaf Commitments
Salted, double-hashed commitments for individual certificate fields.

Owner: Protocol/Crypto Engineer
Module ID: M02

Commitment Rules (Hard Contracts):
1. Leaf message: "{field_name}:{field_value}"
2. Salted message: "{salt}:{field_name}:{field_value}"
3. leaf = sha256(sha256(utf8(message)).digest()).hex()

The second pass hashes the raw 32-byte intermediate digest, not its hex
text. A single pass produces a different, incompatible commitment.
"""
from __future__ import annotations

from core.crypto.hashing import sha256
from core.schemas.errors import FieldEncodingException


SALT_DISPLAY_GROUP = 4


def canonicalize_salt(salt: str | None) -> str | None:
    """
    Return the canonical (de-dashed) form of a salt.

    Display layers group salts as "abcd-1234-..."; the engine always
    consumes the form without dashes. Whitespace is stripped. An empty
    result means no salt.
    """
    if salt is None:
        return None
    cleaned = salt.strip().replace("-", "")
    return cleaned or None


def format_salt_for_display(salt: str) -> str:
    """
    Group a salt into dash-separated chunks for humans.

    Example:
        >>> format_salt_for_display("abcd1234ef")
        'abcd-1234-ef'
    """
    cleaned = salt.replace("-", "")
    return "-".join(
        cleaned[i:i + SALT_DISPLAY_GROUP]
        for i in range(0, len(cleaned), SALT_DISPLAY_GROUP)
    )


def _as_text(value: str | bytes, field_name: str | None, label: str) -> str:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FieldEncodingException(
                f"{label} is not valid UTF-8: {e}",
                field_name=field_name,
            ) from e
    if not isinstance(value, str):
        raise FieldEncodingException(
            f"{label} must be text, got {type(value).__name__}",
            field_name=field_name,
        )
    return value


def build_leaf_message(
    field_name: str | bytes,
    field_value: str | bytes,
    salt: str | None = None,
) -> str:
    """
    Build the plaintext leaf message for a field.

    Args:
        field_name: Field identifier, e.g. "name"
        field_value: Field value as printed on the certificate
        salt: Optional per-certificate secret (dashes are removed)

    Returns:
        "{field_name}:{field_value}", prefixed with "{salt}:" when salted
    """
    name = _as_text(field_name, None, "Field name")
    value = _as_text(field_value, name, "Field value")
    message = f"{name}:{value}"

    canonical_salt = canonicalize_salt(salt)
    if canonical_salt:
        message = f"{canonical_salt}:{message}"
    return message


def commit_leaf(
    field_name: str | bytes,
    field_value: str | bytes,
    salt: str | None = None,
) -> str:
    """
    Compute the leaf commitment for a field.

    Rule: leaf = sha256(sha256(utf8(message))).hex()

    Args:
        field_name: Field identifier
        field_value: Field value (empty is legal)
        salt: Optional salt; omitting it when the issuer used one yields a
              different commitment (and a failed proof), never an error

    Returns:
        64-char lowercase hex commitment

    Raises:
        FieldEncodingException: If the text cannot be encoded as UTF-8
    """
    message = build_leaf_message(field_name, field_value, salt)
    try:
        encoded = message.encode("utf-8")
    except UnicodeEncodeError as e:
        raise FieldEncodingException(
            f"Field text cannot be encoded as UTF-8: {e.reason}",
            field_name=field_name if isinstance(field_name, str) else None,
        ) from e

    return sha256(sha256(encoded)).hex()


__all__ = [
    "canonicalize_salt",
    "format_salt_for_display",
    "build_leaf_message",
    "commit_leaf",
]
