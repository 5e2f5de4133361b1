"""
OAuth1 signing (HMAC-SHA1) backed by oauthlib.

Without a user token the request is signed with the consumer credentials
only (two-legged / app-only OAuth).
"""

import logging
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from oauthlib import oauth1

from ..core.body import HttpBodyUrlEncoded
from ..core.exceptions import ConfigurationError
from .signer import AbstractRequestSigner, OAuthClientApp, OAuthUser

if TYPE_CHECKING:
    from ..core.request import BaseHttpRequest

logger = logging.getLogger(__name__)

AUTHORIZATION = "Authorization"
FORM_URLENCODED = "application/x-www-form-urlencoded"

SIGNATURE_TYPE_AUTH_HEADER = oauth1.SIGNATURE_TYPE_AUTH_HEADER
SIGNATURE_TYPE_QUERY = oauth1.SIGNATURE_TYPE_QUERY


class RequestSignerOAuth1(AbstractRequestSigner):
    """
    OAuth1 signer.

    Args:
        client_app: Consumer key/secret
        user: User token/secret, None or empty fields -> app-only signature
        signature_type: SIGNATURE_TYPE_AUTH_HEADER (default) or SIGNATURE_TYPE_QUERY

    Example:
        >>> signer = RequestSignerOAuth1(
        ...     OAuthClientApp("consumer-key", "secret"),
        ...     OAuthUser("token", "token-secret"),
        ... )
        >>> request = (BaseHttpRequest.Builder()
        ...            .set_url("https://api.example.com/1/statuses")
        ...            .set_signer(signer)
        ...            .set_response_parser(BODY_TO_JSON)
        ...            .build())
    """

    def __init__(
        self,
        client_app: OAuthClientApp,
        user: Optional[OAuthUser] = None,
        signature_type: str = SIGNATURE_TYPE_AUTH_HEADER,
    ):
        super().__init__(client_app, user)
        if signature_type not in (SIGNATURE_TYPE_AUTH_HEADER, SIGNATURE_TYPE_QUERY):
            raise ConfigurationError(f"unsupported OAuth1 signature type: {signature_type}")
        self.signature_type = signature_type

    def _create_client(self) -> oauth1.Client:
        token = getattr(self.user, "token", None) or None
        token_secret = getattr(self.user, "token_secret", None) or None
        if token is None:
            token_secret = None
        return oauth1.Client(
            self.client_app.consumer_key,
            client_secret=self.client_app.consumer_secret,
            resource_owner_key=token,
            resource_owner_secret=token_secret,
            signature_method=oauth1.SIGNATURE_HMAC,
            signature_type=self.signature_type,
        )

    @staticmethod
    def _signable_body(request: 'BaseHttpRequest') -> Tuple[Optional[str], Dict[str, str]]:
        """Form-encoded body params are part of the signature, other bodies are not."""
        body = request.body
        if isinstance(body, HttpBodyUrlEncoded):
            encoded = body.get_encoded_params()
            if encoded:
                return encoded.decode("ascii"), {"Content-Type": FORM_URLENCODED}
        return None, {}

    def sign(self, request: 'BaseHttpRequest') -> None:
        client = self._create_client()
        body, headers = self._signable_body(request)
        uri, signed_headers, _ = client.sign(
            request.url,
            http_method=request.http_method,
            body=body,
            headers=headers,
        )
        if self.signature_type == SIGNATURE_TYPE_QUERY:
            request.replace_signed_url(uri)
        else:
            request.set_header(AUTHORIZATION, signed_headers[AUTHORIZATION])
        logger.debug(
            "Signed %s %s (user token: %s)",
            request.http_method,
            request.url,
            "yes" if client.resource_owner_key else "no",
        )
