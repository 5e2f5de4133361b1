"""
OAuth1 signed requests.

Consumer credentials are read from OAUTH_CONSUMER_KEY / OAUTH_CONSUMER_SECRET,
the user token from OAUTH_TOKEN / OAUTH_TOKEN_SECRET (optional: without it
requests are signed by the application only).
"""

import os

from http_request import (
    BODY_TO_JSON,
    BaseHttpRequest,
    HttpBodyUrlEncoded,
    HttpClient,
    HttpException,
    OAuthClientApp,
    OAuthUser,
    RequestSignerOAuth1,
)

API_URL = os.environ.get("OAUTH_API_URL", "https://api.example.com/1.1/statuses/update.json")


def main():
    app = OAuthClientApp(os.environ["OAUTH_CONSUMER_KEY"], os.environ["OAUTH_CONSUMER_SECRET"])
    user = OAuthUser(os.environ.get("OAUTH_TOKEN"), os.environ.get("OAUTH_TOKEN_SECRET"))

    body = HttpBodyUrlEncoded()
    body.add("status", "Hello from http-request-core")

    request = (BaseHttpRequest.Builder()
               .set_url(API_URL)
               .set_body(body)
               .set_signer(RequestSignerOAuth1(app, user))
               .set_response_parser(BODY_TO_JSON)
               .build())

    with HttpClient() as client:
        try:
            print(client.parse_request(request))
        except HttpException as e:
            print(f"{e.error_code.value}: {e}")


if __name__ == "__main__":
    main()
