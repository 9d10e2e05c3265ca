"""
Shared fakes for the Gemini client.

The fakes mirror the parts of google-genai's async surface that the code
touches: client.aio.files.get / list and client.aio.models.generate_content.
"""

from types import SimpleNamespace

import pytest


class FakePager:
    """Async iterator over file entries; can fail after some entries."""

    def __init__(self, entries, error_after=None, error=None):
        self.entries = list(entries)
        self.error_after = error_after
        self.error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for idx, entry in enumerate(self.entries):
            if self.error is not None and idx == self.error_after:
                raise self.error
            yield entry
        if self.error is not None and self.error_after is not None and self.error_after >= len(self.entries):
            raise self.error


class FakeFiles:
    def __init__(self, files=None, failing=None, pager=None, list_error=None):
        # files: {"2016-info": SimpleNamespace(uri=..., mime_type=...)}
        self.files = files or {}
        self.failing = failing or {}
        self.pager = pager or FakePager([])
        self.list_error = list_error
        self.get_calls = []
        self.list_calls = []

    async def get(self, name):
        self.get_calls.append(name)
        if name in self.failing:
            raise self.failing[name]
        if name not in self.files:
            raise LookupError(f"File {name} not found")
        return self.files[name]

    async def list(self, config=None):
        self.list_calls.append(config)
        if self.list_error is not None:
            raise self.list_error
        return self.pager


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGeminiClient:
    def __init__(self, files=None, models=None):
        self.files = files or FakeFiles()
        self.models = models or FakeModels(text="SQL:\nSELECT 1;\n\nEXPLANATION:\nReturns one.")
        self.aio = SimpleNamespace(files=self.files, models=self.models)


def info_file(uri, mime_type="text/plain"):
    return SimpleNamespace(uri=uri, mime_type=mime_type)


def listed_file(name, display_name=None):
    return SimpleNamespace(name=name, display_name=display_name)


@pytest.fixture
def fake_client():
    return FakeGeminiClient()


@pytest.fixture
def no_env_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
