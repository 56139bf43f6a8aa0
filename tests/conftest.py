"""Shared fixtures: a synthetic home page, its on-demand script and a fake fetcher."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add repository root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from transaction import parse, parse_indices


# Bytes 0x00..0x0f
KEY = "AAECAwQFBgcICQoLDA0ODw=="
KEY_BYTES = list(range(16))

ONDEMAND_HASH = "5f3a9c"
ONDEMAND_URL = f"https://abs.twimg.com/responsive-web/client-web/ondemand.s.{ONDEMAND_HASH}a.js"

# key_bytes[5] % 2 == 1 selects the second frame. The script indices give
# frame_time = 13 * 14 * 15 = 2730, so the animation is sampled at 2730 / 4096.
HOME_HTML = f"""<!DOCTYPE html>
<html dir="ltr" lang="en">
<head>
<meta charset="utf-8"/>
<meta name="twitter-site-verification" content="{KEY}"/>
<!-- <svg id="loading-x-anim-9"><path d="M 9 9"/></svg> -->
<script nonce="abc">window.__SCRIPTS__={{"ondemand.s":"{ONDEMAND_HASH}","main":"0c1d"}}</script>
</head>
<body>
<div id="react-root">
<svg id="logo" viewBox="0 0 24 24"><path d="M 1 1 L 2 2"/></svg>
<svg id="loading-x-anim-0" viewBox="0 0 90 90"><g><path d="M 0 0 0C 0 0 0 0 0 0 0 0"/></g></svg>
<svg id="loading-x-anim-1" viewBox="0 0 90 90"><g><path d="M14 113 224"/><path d="C253 119 176 118 112 235 148 11"/></g></svg>
</div>
</body>
</html>
"""

ONDEMAND_JS = (
    '"use strict";(self.webpackChunk=self.webpackChunk||[]).push([[1],{1:(e,t,n)=>{'
    'let r=(e[2], 16),o=(e[13], 16)+(e[14], 16)*(e[15], 16);return r+o}}]);'
)

SELECTED_FRAME = [14.0, 113.0, 224.0, 253.0, 119.0, 176.0, 118.0, 112.0, 235.0, 148.0, 11.0]
FRAME_TIME = 2730
# Recorded from the web client's animation for SELECTED_FRAME at 2730 / 4096
ANIMATION_KEY = "000001.F44ABC40001D6.4C88B31754AC38.4C88B31754AC38.F44ABC40001D600"


class FakeFetcher:
    """Serves canned bodies by URL and records every call."""

    def __init__(self, pages):
        self.pages = dict(pages)
        self.calls = []

    async def __call__(self, method, url, headers, data=None):
        self.calls.append({"method": method, "url": url, "headers": dict(headers), "data": data})
        await asyncio.sleep(0)
        body = self.pages[(method, url)] if (method, url) in self.pages else self.pages.get(url)
        if body is None:
            raise KeyError(f"No canned response for {method} {url}")
        return body

    def count(self, url):
        return sum(1 for call in self.calls if call["url"] == url)


@pytest.fixture
def home_document():
    return parse(HOME_HTML)


@pytest.fixture
def index_set():
    return parse_indices(ONDEMAND_JS)


@pytest.fixture
def fake_fetch():
    return FakeFetcher({
        "https://twitter.com": HOME_HTML,
        ONDEMAND_URL: ONDEMAND_JS,
    })
