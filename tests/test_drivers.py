from drivers.browser import redirect_chain


class FakeResponse:
    def __init__(self, status, request=None):
        self.status = status
        self.request = request


class FakeRequest:
    """Mimics the redirect links Playwright keeps between requests."""

    def __init__(self, url, status=None, redirected_from=None):
        self.url = url
        self.status = status
        self.redirected_from = redirected_from
        self.redirected_to = None
        if redirected_from is not None:
            redirected_from.redirected_to = self

    async def response(self):
        return FakeResponse(self.status) if self.status else None


async def test_redirect_chain_oldest_hop_first():
    first = FakeRequest("http://example.com/", status=301)
    second = FakeRequest("https://example.com/", status=302, redirected_from=first)
    final = FakeRequest("https://www.example.com/", redirected_from=second)

    chain = await redirect_chain(FakeResponse(200, request=final))

    assert chain == [
        {"url": "http://example.com/", "status": 301, "location": "https://example.com/"},
        {"url": "https://example.com/", "status": 302, "location": "https://www.example.com/"},
    ]


async def test_no_redirects():
    request = FakeRequest("https://example.com/")

    assert await redirect_chain(FakeResponse(200, request=request)) == []
