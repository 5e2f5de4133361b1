"""
Configuration from the environment and structured logging.

Try:
    HTTP_REQUEST_LOG_ENABLED=true HTTP_REQUEST_LOG_FORMAT=json python examples/03_logging_and_env_config.py
"""

from http_request import BODY_TO_STRING, HttpClient, HttpRequestGet, JarCookieManager, load_from_env


def main():
    config = load_from_env(timeout_read=15)
    print(f"timeout={config.http.timeout.as_tuple()} logging={'on' if config.logging else 'off'}")

    cookies = JarCookieManager()
    with HttpClient(config, cookie_manager=cookies) as client:
        client.parse_request(HttpRequestGet("https://httpbin.org/cookies/set?flavour=oat", parser=BODY_TO_STRING))
        print(client.parse_request(HttpRequestGet("https://httpbin.org/cookies", parser=BODY_TO_STRING)))


if __name__ == "__main__":
    main()
