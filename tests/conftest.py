from typing import List

import pytest

from embedr.core.entities import HttpResponse
from embedr.core.interfaces import Transport


VIMEO_URL = "http://vimeo.com/6382511"

VIMEO_JSON = (
    b'{"type":"video","version":"1.0","provider_name":"Vimeo",'
    b'"provider_url":"https:\\/\\/vimeo.com\\/","title":"Sample clip",'
    b'"author_name":"Someone","width":640,"height":360,'
    b'"html":"<iframe src=\\"https:\\/\\/player.vimeo.com\\/video\\/6382511\\"><\\/iframe>",'
    b'"video_id":6382511}'
)

VIMEO_XML = (
    b'<?xml version="1.0" encoding="utf-8"?>\n'
    b'<oembed>\n'
    b'  <type>video</type>\n'
    b'  <version>1.0</version>\n'
    b'  <provider_name>Vimeo</provider_name>\n'
    b'  <title>Sample clip</title>\n'
    b'  <width>640</width>\n'
    b'  <height>360</height>\n'
    b'  <html>&lt;iframe src="https://player.vimeo.com/video/6382511"&gt;&lt;/iframe&gt;</html>\n'
    b'</oembed>\n'
)


class FakeTransport(Transport):
    """Transport double returning canned responses in order and recording URLs."""

    def __init__(self, *responses: HttpResponse):
        self.responses: List[HttpResponse] = list(responses)
        self.calls: List[str] = []

    def request(self, url: str) -> HttpResponse:
        self.calls.append(url)
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


@pytest.fixture
def fake_transport():
    def _make(status_code: int = 200, body: bytes = VIMEO_JSON) -> FakeTransport:
        return FakeTransport(HttpResponse(status_code=status_code, body=body))
    return _make
