"""Request signing."""

from .signer import (
    RequestSigner,
    RequestSignerNone,
    AbstractRequestSigner,
    OAuthClientApp,
    OAuthUser,
)
from .oauth1 import RequestSignerOAuth1, SIGNATURE_TYPE_AUTH_HEADER, SIGNATURE_TYPE_QUERY

__all__ = [
    "RequestSigner",
    "RequestSignerNone",
    "AbstractRequestSigner",
    "OAuthClientApp",
    "OAuthUser",
    "RequestSignerOAuth1",
    "SIGNATURE_TYPE_AUTH_HEADER",
    "SIGNATURE_TYPE_QUERY",
]
