"""Tests for API endpoints."""

import pytest
from datetime import datetime, timedelta, timezone
from httpx import ASGITransport, AsyncClient

from fakes import BrokenStore, CollidingStore
from shortener.exceptions import InvalidConfigurationError
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from web_app import create_app

GENERATE_PATH = "/api/v1/generate_short_url"
SHORT_URL_PREFIX = "https://sho.rt/"


def token_of(response) -> str:
    short_url = response.json()["short_url"]
    assert short_url.startswith(SHORT_URL_PREFIX)
    return short_url[len(SHORT_URL_PREFIX):]


async def make_client(store, config, logger, **service_kwargs):
    service = URLShortenerService(store=store, logger=logger, **service_kwargs)
    app = create_app(service_instance=service, config=config)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


class TestGenerateShortUrl:
    """Test POST/PUT /api/v1/generate_short_url."""

    async def test_json_body(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert list(response.json()) == ["short_url"]
        token = token_of(response)
        assert len(token) == 5
        assert ShortCodeGenerator.is_valid_format(token)
        assert (await store.lookup(token)).expire_at is None

    async def test_put_allowed(self, client, sample_urls):
        response = await client.put(GENERATE_PATH, json={"long_url": sample_urls[0]})
        assert response.status_code == 200

    async def test_json_ttl(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0], "ttl_seconds": 60})

        link = await store.lookup(token_of(response))
        assert link.expire_at - link.created_at == timedelta(seconds=60)

    async def test_urlencoded_form(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, data={"long_url": sample_urls[1], "ttl_seconds": "120"})

        assert response.status_code == 200
        link = await store.lookup(token_of(response))
        assert link.long_url == sample_urls[1]
        assert link.expire_at - link.created_at == timedelta(seconds=120)

    async def test_urlencoded_form_without_ttl(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, data={"long_url": sample_urls[1]})

        assert response.status_code == 200
        assert (await store.lookup(token_of(response))).expire_at is None

    async def test_multipart_form(self, client, store, sample_urls):
        response = await client.post(
            GENERATE_PATH,
            files={"long_url": (None, sample_urls[2]), "ttl_seconds": (None, "30")},
        )

        assert response.status_code == 200
        link = await store.lookup(token_of(response))
        assert link.long_url == sample_urls[2]
        assert link.expire_at - link.created_at == timedelta(seconds=30)

    async def test_short_url_uses_configured_path(self, store, config, logger, sample_urls):
        config.short_url_path = "//s//"
        async with await make_client(store, config, logger) as client:
            response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})

        assert response.json()["short_url"].startswith("https://sho.rt/s/")

    @pytest.mark.parametrize("body", [{}, {"long_url": ""}, {"long_url": None}])
    async def test_empty_long_url(self, client, body):
        response = await client.post(GENERATE_PATH, json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == "long_url cannot be empty"

    async def test_empty_long_url_form(self, client):
        response = await client.post(GENERATE_PATH, data={"ttl_seconds": "5"})
        assert response.status_code == 400

    async def test_negative_ttl(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0], "ttl_seconds": -1})

        assert response.status_code == 400
        assert "ttl_seconds" in response.json()["detail"]
        assert len(store) == 0

    async def test_negative_ttl_form(self, client, sample_urls):
        response = await client.post(GENERATE_PATH, data={"long_url": sample_urls[0], "ttl_seconds": "-10"})
        assert response.status_code == 400

    async def test_huge_ttl_json(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0], "ttl_seconds": 10**12})

        assert response.status_code == 400
        assert response.json()["detail"] == "ttl_seconds is too large"
        assert len(store) == 0

    async def test_huge_ttl_form(self, client, store, sample_urls):
        response = await client.post(GENERATE_PATH, data={"long_url": sample_urls[0], "ttl_seconds": str(10**12)})

        assert response.status_code == 400
        assert response.json()["detail"] == "ttl_seconds is too large"
        assert len(store) == 0

    @pytest.mark.parametrize("ttl", ["abc", "1.5"])
    async def test_non_numeric_ttl_form(self, client, sample_urls, ttl):
        response = await client.post(GENERATE_PATH, data={"long_url": sample_urls[0], "ttl_seconds": ttl})

        assert response.status_code == 400
        assert response.json()["detail"] == "ttl_seconds is invalid"

    @pytest.mark.parametrize("ttl", ["60", 1.5, True])
    async def test_non_integer_ttl_json(self, client, sample_urls, ttl):
        response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0], "ttl_seconds": ttl})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("cant parse request body")

    @pytest.mark.parametrize("long_url", ["not-a-url", "ftp://example.com", "https://"])
    async def test_invalid_long_url(self, client, store, long_url):
        response = await client.post(GENERATE_PATH, json={"long_url": long_url})

        assert response.status_code == 400
        assert "long_url" in response.json()["detail"]
        assert len(store) == 0

    @pytest.mark.parametrize("content", [b"", b"{not json", b"[1, 2]", b"long_url=https://example.com"])
    async def test_unparseable_json_body(self, client, content):
        response = await client.post(
            GENERATE_PATH,
            content=content,
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["detail"].startswith("cant parse request body")

    async def test_content_type_selects_parser(self, client, sample_urls):
        """A JSON payload sent as a form is not rescued by the JSON parser."""
        response = await client.post(
            GENERATE_PATH,
            content=f'{{"long_url": "{sample_urls[0]}"}}'.encode(),
            headers={"content-type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("method", ["GET", "DELETE", "PATCH"])
    async def test_method_not_allowed(self, client, method):
        response = await client.request(method, GENERATE_PATH)

        assert response.status_code == 405
        assert response.headers["allow"] == "PUT, POST"

    async def test_cors_preflight_is_not_allowed(self, client):
        response = await client.options(
            GENERATE_PATH,
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "PUT"},
        )

        assert response.status_code == 405
        assert "access-control-allow-origin" not in response.headers

    async def test_storage_error(self, config, logger, sample_urls):
        async with await make_client(BrokenStore(logger=logger), config, logger) as client:
            response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal Server Error"

    async def test_exhaustion(self, config, logger, sample_urls):
        store = CollidingStore(collisions=1000, logger=logger)
        async with await make_client(store, config, logger) as client:
            response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal Server Error"
        assert store.insert_calls == 6

    async def test_collisions_are_transparent(self, config, logger, sample_urls):
        store = CollidingStore(collisions=2, logger=logger)
        async with await make_client(store, config, logger) as client:
            response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})

        assert response.status_code == 200
        assert store.insert_calls == 3


class TestRedirect:
    """Test short URL resolution."""

    async def test_redirect(self, client, sample_urls):
        create_response = await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]})
        token = token_of(create_response)

        response = await client.get(f"/{token}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == sample_urls[0]

    async def test_last_path_segment_is_token(self, client, sample_urls):
        token = token_of(await client.post(GENERATE_PATH, json={"long_url": sample_urls[1]}))

        for path in (f"/s/{token}", f"/a/b/c/{token}", f"/s/{token}/"):
            response = await client.get(path, follow_redirects=False)
            assert response.status_code == 301
            assert response.headers["location"] == sample_urls[1]

    async def test_any_method_resolves(self, client, sample_urls):
        token = token_of(await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]}))

        response = await client.post(f"/{token}", follow_redirects=False)
        assert response.status_code == 301

    @pytest.mark.parametrize("method", ["OPTIONS", "TRACE", "DELETE", "HEAD"])
    async def test_every_method_resolves(self, client, sample_urls, method):
        token = token_of(await client.post(GENERATE_PATH, json={"long_url": sample_urls[0]}))

        response = await client.request(
            method,
            f"/{token}",
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "GET"},
            follow_redirects=False,
        )

        assert response.status_code == 301
        assert response.headers["location"] == sample_urls[0]

    async def test_location_is_not_requoted(self, client):
        long_url = "https://example.com/a|b^c{d}?q=`x`"
        token = token_of(await client.post(GENERATE_PATH, json={"long_url": long_url}))

        response = await client.get(f"/{token}", follow_redirects=False)

        assert response.status_code == 301
        assert response.headers["location"] == long_url

    async def test_location_encodes_non_ascii(self, client):
        token = token_of(await client.post(GENERATE_PATH, json={"long_url": "https://example.com/café?q=%20"}))

        response = await client.get(f"/{token}", follow_redirects=False)

        assert response.headers["location"] == "https://example.com/caf%C3%A9?q=%20"

    @pytest.mark.parametrize("path", ["/%00", "/a-b", "/s/ab%20cd", "/"])
    async def test_malformed_token_skips_store(self, config, logger, path):
        store = BrokenStore(logger=logger)
        async with await make_client(store, config, logger) as client:
            response = await client.get(path, follow_redirects=False)

        assert response.status_code == 404
        assert store.timeouts == []

    @pytest.mark.parametrize("path", ["/zzzzz", "/s/zzzzz", "/", "/api/v1/unknown"])
    async def test_not_found(self, client, path):
        response = await client.get(path, follow_redirects=False)

        assert response.status_code == 404

    async def test_expired_is_not_found(self, client, store, sample_urls):
        created_at = datetime.now(timezone.utc) - timedelta(hours=2)
        await store.insert("old12", sample_urls[0], created_at, created_at + timedelta(hours=1))

        response = await client.get("/old12", follow_redirects=False)

        assert response.status_code == 404
        assert response.json()["detail"] == "Not Found"

    async def test_storage_error(self, config, logger):
        async with await make_client(BrokenStore(logger=logger), config, logger) as client:
            response = await client.get("/abcde", follow_redirects=False)

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal Server Error"
        assert "connection refused" not in response.text


class TestScenario:
    """Create, resolve within TTL, and miss an unknown token."""

    async def test_create_then_resolve(self, client):
        response = await client.post(
            GENERATE_PATH,
            json={"long_url": "https://example.com/page", "ttl_seconds": 3600},
        )
        assert response.status_code == 200
        token = token_of(response)
        assert len(token) == 5

        redirect = await client.get(f"/{token}", follow_redirects=False)
        assert redirect.status_code == 301
        assert redirect.headers["location"] == "https://example.com/page"

        unknown = "0" * 6
        assert (await client.get(f"/{unknown}")).status_code == 404


class TestMiddleware:
    """Test request id propagation and error recovery."""

    async def test_request_id_echoed(self, client):
        response = await client.get("/zzzzz", headers={"X-Request-ID": "req-42"})
        assert response.headers["x-request-id"] == "req-42"

    async def test_request_id_generated(self, client):
        response = await client.get("/zzzzz")
        assert len(response.headers["x-request-id"]) == 32

    async def test_unexpected_error_is_500(self, config, logger, sample_urls):
        class ExplodingStore(BrokenStore):
            async def lookup(self, token, timeout=None):
                raise RuntimeError("boom")

        async with await make_client(ExplodingStore(logger=logger), config, logger) as client:
            response = await client.get("/abcde")

        assert response.status_code == 500
        assert "boom" not in response.text


class TestAppConfiguration:
    """Short URL settings are validated when the app is built."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("short_url_scheme", "ftp"),
            ("short_url_domain", ""),
            ("short_url_domain", "sho.rt/s"),
            ("short_url_path", "s/"),
        ],
    )
    def test_invalid_settings_fail_fast(self, service, config, field, value):
        setattr(config, field, value)

        with pytest.raises(InvalidConfigurationError):
            create_app(service_instance=service, config=config)
