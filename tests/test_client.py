import logging
import os

import pytest

import embedr.bootstrap as bootstrap
import embedr.core.config as config
import embedr.formats.registry as format_registry
from embedr.client import OEmbed
from embedr.core.entities import ClientState, FormatDescriptor, HttpResponse
from embedr.core.errors import (
    CodecUnavailableError,
    MalformedResponseError,
    NotFoundError,
    UnsupportedError,
    UsageError,
)
from embedr.formats.codecs import decode_json

from conftest import VIMEO_JSON, VIMEO_URL, VIMEO_XML, FakeTransport


class TestConstruction:

    def test_url_required(self):
        with pytest.raises(UsageError):
            OEmbed()
        with pytest.raises(UsageError):
            OEmbed("")
        with pytest.raises(UsageError):
            OEmbed(format="xml", maxwidth=600)

    def test_missing_url_is_a_value_error(self):
        with pytest.raises(ValueError):
            OEmbed(providers={})

    def test_wrong_protocol(self):
        with pytest.raises(UnsupportedError):
            OEmbed("mailto:ben@example.com")

    def test_provider_check(self):
        with pytest.raises(UnsupportedError):
            OEmbed("http://google.com")
        OEmbed("http://vimeo.com")

    def test_www_and_bare_domain_share_provider(self):
        assert OEmbed("http://www.vimeo.com/123").spec.provider is OEmbed("http://vimeo.com/123").spec.provider

    def test_request_url_dot_format(self):
        client = OEmbed(VIMEO_URL)
        assert client.request_url == "http://vimeo.com/api/oembed.json?url=http%3A%2F%2Fvimeo.com%2F6382511"
        assert client.format == "json"
        assert client.domain == "vimeo.com"
        assert client.url == VIMEO_URL

    def test_request_url_query_format(self):
        client = OEmbed("http://www.youtube.com/watch?v=abc")
        assert client.request_url.endswith("&format=json")
        assert client.request_url.startswith("http://www.youtube.com/oembed?url=http%3A%2F%2F")

    def test_extra_params_are_appended(self):
        client = OEmbed(VIMEO_URL, maxwidth=600, maxheight=400)
        assert client.request_url.endswith("&maxwidth=600&maxheight=400")
        assert client.params == {"maxwidth": "600", "maxheight": "400"}

    def test_none_param_is_sent_empty(self):
        client = OEmbed(VIMEO_URL, maxwidth=None)
        assert client.request_url.endswith("&maxwidth=")

    def test_unknown_format_fails_before_any_request(self):
        transport = FakeTransport(HttpResponse(200, VIMEO_JSON))
        with pytest.raises(UsageError):
            OEmbed(VIMEO_URL, format="yaml", transport=transport)
        assert transport.calls == []

    def test_custom_providers_replace_defaults(self):
        providers = {"example.com": {"base": "http://example.com/oembed", "dot_format": False}}
        client = OEmbed("http://www.example.com/v/1", providers=providers)
        assert client.request_url == "http://example.com/oembed?url=http%3A%2F%2Fwww.example.com%2Fv%2F1&format=json"
        with pytest.raises(UnsupportedError):
            OEmbed(VIMEO_URL, providers=providers)

    def test_construction_does_no_io(self):
        transport = FakeTransport(HttpResponse(200, VIMEO_JSON))
        client = OEmbed(VIMEO_URL, transport=transport)
        assert transport.calls == []
        assert client.state is ClientState.CONSTRUCTED
        assert client.data == {}


class TestFetch:

    def test_gets(self):
        transport = FakeTransport(HttpResponse(200, VIMEO_JSON))
        client = OEmbed(VIMEO_URL, transport=transport)
        data = client.gets()

        assert isinstance(data, dict)
        assert data["type"] == "video"
        assert client.data is data
        assert client.state is ClientState.FETCHED
        assert transport.calls == [client.request_url]

    def test_xml_format(self):
        client = OEmbed(VIMEO_URL, format="xml", transport=FakeTransport(HttpResponse(200, VIMEO_XML)))
        assert client.request_url.startswith("http://vimeo.com/api/oembed.xml?")
        assert client.fetch()["type"] == "video"

    def test_embedding_disabled_returns_none(self):
        client = OEmbed(VIMEO_URL, transport=FakeTransport(HttpResponse(401)))
        assert client.fetch() is None
        assert client.data is None
        assert client.state is ClientState.FETCHED

    def test_not_found(self):
        client = OEmbed(VIMEO_URL, transport=FakeTransport(HttpResponse(404)))
        with pytest.raises(NotFoundError, match="6382511"):
            client.fetch()
        assert client.state is ClientState.FAILED

    def test_format_not_implemented(self):
        client = OEmbed(VIMEO_URL, format="xml", transport=FakeTransport(HttpResponse(501)))
        with pytest.raises(UnsupportedError, match="xml"):
            client.fetch()

    def test_malformed_body(self):
        client = OEmbed(VIMEO_URL, transport=FakeTransport(HttpResponse(200, b"<html>nope</html>")))
        with pytest.raises(MalformedResponseError):
            client.fetch()
        assert client.state is ClientState.FAILED

    def test_refetch_repeats_request(self):
        transport = FakeTransport(HttpResponse(404), HttpResponse(200, VIMEO_JSON))
        client = OEmbed(VIMEO_URL, transport=transport)
        with pytest.raises(NotFoundError):
            client.fetch()
        assert client.fetch()["type"] == "video"
        assert client.fetch()["type"] == "video"
        assert len(transport.calls) == 3
        assert client.state is ClientState.FETCHED


class TestFormatFallback:

    def test_falls_back_to_xml_when_json_unavailable(self, monkeypatch):
        broken_json = FormatDescriptor(id="json", requires="embedr_no_such_json_backend", decode=decode_json)
        monkeypatch.setattr(format_registry, "FORMATS", {"json": broken_json, "xml": format_registry.XML})

        transport = FakeTransport(HttpResponse(200, VIMEO_XML))
        client = OEmbed(VIMEO_URL, transport=transport)

        assert client.format == "xml"
        assert client.request_url.startswith("http://vimeo.com/api/oembed.xml?")
        data = client.fetch()
        assert data["type"] == "video"
        assert data["width"] == "640"

    def test_no_codec_available(self, monkeypatch):
        monkeypatch.setattr(format_registry, "FORMATS", {
            "json": FormatDescriptor("json", "embedr_no_such_json_backend", decode_json),
            "xml": FormatDescriptor("xml", "embedr_no_such_xml_backend", decode_json),
        })
        with pytest.raises(CodecUnavailableError) as exc_info:
            OEmbed(VIMEO_URL)
        assert exc_info.value.attempted == ["json", "xml"]


@pytest.mark.skipif(os.environ.get("EMBEDR_LIVE_TESTS") != "1", reason="set EMBEDR_LIVE_TESTS=1 to hit the network")
def test_live_vimeo():
    client = OEmbed(VIMEO_URL)
    assert client.fetch()["type"] == "video"


class ClosingTransport(FakeTransport):
    def __init__(self, *responses):
        super().__init__(*responses)
        self.close_count = 0

    def close(self):
        self.close_count += 1


class TestDefaultTransport:

    def test_owned_transport_is_closed_after_each_fetch(self, monkeypatch):
        created = []

        def _create_transport():
            transport = ClosingTransport(HttpResponse(200, VIMEO_JSON))
            created.append(transport)
            return transport

        monkeypatch.setattr(bootstrap, "create_transport", _create_transport)
        client = OEmbed(VIMEO_URL)
        client.fetch()
        client.fetch()

        assert len(created) == 2
        assert [t.close_count for t in created] == [1, 1]

    def test_owned_transport_is_closed_on_error(self, monkeypatch):
        transport = ClosingTransport(HttpResponse(404))
        monkeypatch.setattr(bootstrap, "create_transport", lambda: transport)
        with pytest.raises(NotFoundError):
            OEmbed(VIMEO_URL).fetch()
        assert transport.close_count == 1

    def test_injected_transport_is_left_open(self):
        transport = ClosingTransport(HttpResponse(200, VIMEO_JSON))
        OEmbed(VIMEO_URL, transport=transport).fetch()
        assert transport.close_count == 0

    def test_default_transport_does_not_load_env_file(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise AssertionError(".env must not be loaded by library code")

        monkeypatch.setattr(config, "load_dotenv", _fail)
        monkeypatch.setenv("EMBEDR_TIMEOUT", "4")
        transport = bootstrap.create_transport()
        try:
            assert transport.timeout == 4.0
        finally:
            transport.close()


class TestFetchLogging:

    def test_logs_start_and_finish(self, caplog):
        client = OEmbed(VIMEO_URL, transport=FakeTransport(HttpResponse(200, VIMEO_JSON)))
        with caplog.at_level(logging.INFO, logger="embedr.client"):
            client.fetch()
        messages = [r.getMessage() for r in caplog.records if r.name == "embedr.client"]
        assert messages[0].startswith("Fetching embed data for")
        assert messages[-1].startswith(f"Fetch finished for {VIMEO_URL}")

    def test_logs_disabled_finish(self, caplog):
        client = OEmbed(VIMEO_URL, transport=FakeTransport(HttpResponse(401)))
        with caplog.at_level(logging.INFO, logger="embedr.client"):
            client.fetch()
        assert "embedding disabled" in caplog.records[-1].getMessage()
