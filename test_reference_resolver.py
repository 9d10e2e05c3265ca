"""
Tests for info file resolution and the presence check.

All Gemini traffic goes through the fakes in conftest.py; nothing here
touches the network.
"""

import asyncio
from unittest.mock import patch

import pytest

from conftest import FakeFiles, FakeGeminiClient, FakePager, info_file, listed_file
from context_layer.reference_resolver import check_info_files_presence, resolve_reference_documents
from drafting_layer.errors import FileListingError, MissingCredentialError


class HandshakeFiles(FakeFiles):
    """The 2016 lookup only finishes once the 2017 lookup has started."""

    def __init__(self, files, failing=None):
        super().__init__(files=files, failing=failing)
        self.peer_started = asyncio.Event()

    async def get(self, name):
        if name == "2016-info":
            await self.peer_started.wait()
        else:
            self.peer_started.set()
        return await super().get(name)


def client_with_info_files(*years, failing=None):
    files = {f"{year}-info": info_file(f"https://files/{year}") for year in years}
    return FakeGeminiClient(files=FakeFiles(files=files, failing=failing))


class TestResolveReferenceDocuments:
    """resolve_reference_documents()"""

    @pytest.mark.asyncio
    async def test_no_loaded_years_makes_no_calls(self):
        client = client_with_info_files(2016)
        documents, attached = await resolve_reference_documents(client, [])
        assert documents == []
        assert attached == []
        assert client.files.get_calls == []

    @pytest.mark.asyncio
    async def test_years_without_info_files_make_no_calls(self):
        """2023 has a table but no info file; unknown years are ignored."""
        client = client_with_info_files(2016)
        documents, attached = await resolve_reference_documents(client, [2023, 1999])
        assert (documents, attached) == ([], [])
        assert client.files.get_calls == []

    @pytest.mark.asyncio
    async def test_fetches_only_loaded_known_years(self):
        client = client_with_info_files(2016, 2017, 2018)
        documents, attached = await resolve_reference_documents(client, [2018, 2016, 2023])
        assert sorted(client.files.get_calls) == ["2016-info", "2018-info"]
        assert sorted(attached) == [2016, 2018]
        assert {doc.uri for doc in documents} == {"https://files/2016", "https://files/2018"}

    @pytest.mark.asyncio
    async def test_one_failure_does_not_block_others(self):
        client = client_with_info_files(
            2016, 2017, 2018,
            failing={"2017-info": RuntimeError("503 Service Unavailable")},
        )
        documents, attached = await resolve_reference_documents(client, [2016, 2017, 2018])
        assert sorted(attached) == [2016, 2018]
        assert len(documents) == 2
        assert all(doc.year != 2017 for doc in documents)

    @pytest.mark.asyncio
    async def test_lookups_run_concurrently(self):
        """Awaiting one year at a time would never let the 2016 lookup finish."""
        files = {"2016-info": info_file("https://files/2016"), "2017-info": info_file("https://files/2017")}
        client = FakeGeminiClient(files=HandshakeFiles(files))
        documents, attached = await asyncio.wait_for(
            resolve_reference_documents(client, [2016, 2017]), timeout=2
        )
        assert sorted(attached) == [2016, 2017]
        assert len(documents) == 2

    @pytest.mark.asyncio
    async def test_failing_lookup_does_not_hold_up_waiting_one(self):
        files = {"2016-info": info_file("https://files/2016")}
        failing = {"2017-info": RuntimeError("404 Not Found")}
        client = FakeGeminiClient(files=HandshakeFiles(files, failing=failing))
        _, attached = await asyncio.wait_for(
            resolve_reference_documents(client, [2016, 2017]), timeout=2
        )
        assert attached == [2016]

    @pytest.mark.asyncio
    async def test_missing_file_is_dropped_silently(self):
        client = client_with_info_files(2019)
        documents, attached = await resolve_reference_documents(client, [2019, 2020])
        assert attached == [2019]
        assert documents[0].year == 2019

    @pytest.mark.asyncio
    async def test_file_without_uri_is_dropped(self):
        files = {"2021-info": info_file(None), "2022-info": info_file("https://files/2022")}
        client = FakeGeminiClient(files=FakeFiles(files=files))
        _, attached = await resolve_reference_documents(client, [2021, 2022])
        assert attached == [2022]

    @pytest.mark.asyncio
    async def test_missing_mime_type_defaults_to_text(self):
        files = {"2020-info": info_file("https://files/2020", mime_type=None)}
        client = FakeGeminiClient(files=FakeFiles(files=files))
        documents, _ = await resolve_reference_documents(client, [2020])
        assert documents[0].mime_type == "text/plain"

    @pytest.mark.asyncio
    async def test_attached_years_subset_of_loaded_and_known(self):
        client = client_with_info_files(2016, 2017, 2018, 2019, 2020, 2021, 2022)
        loaded = [2017, 2020, 2023]
        _, attached = await resolve_reference_documents(client, loaded)
        assert set(attached) <= set(loaded)
        assert 2023 not in attached


class TestCheckInfoFilesPresence:
    """check_info_files_presence()"""

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_any_call(self, no_env_key):
        with patch("context_layer.reference_resolver.create_gemini_client") as factory:
            with pytest.raises(MissingCredentialError, match="API key required"):
                await check_info_files_presence(None, [2016])
            with pytest.raises(MissingCredentialError):
                await check_info_files_presence("   ", [2016])
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_matches_display_name_or_name_suffix(self):
        pager = FakePager([
            listed_file("files/abc123", display_name="2016-info"),
            listed_file("files/2018-INFO"),
            listed_file("files/unrelated", display_name="notes"),
        ])
        client = FakeGeminiClient(files=FakeFiles(pager=pager))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            report = await check_info_files_presence("key", [2016, 2017, 2018])

        assert report.statuses == {2016: True, 2017: False, 2018: True}
        assert sorted(report.found_years) == [2016, 2018]
        assert client.files.list_calls == [{"page_size": 100}]

    @pytest.mark.asyncio
    async def test_duplicate_matches_are_deduplicated(self):
        pager = FakePager([
            listed_file("files/one", display_name="2019-info"),
            listed_file("files/2019-info"),
        ])
        client = FakeGeminiClient(files=FakeFiles(pager=pager))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            report = await check_info_files_presence("key", [2019])
        assert report.found_years == [2019]

    @pytest.mark.asyncio
    async def test_empty_year_list(self):
        pager = FakePager([listed_file("files/2016-info")])
        client = FakeGeminiClient(files=FakeFiles(pager=pager))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            report = await check_info_files_presence("key", [])
        assert report.statuses == {}
        assert report.found_years == []
        assert len(client.files.list_calls) == 1

    @pytest.mark.asyncio
    async def test_listing_error_fails_whole_check(self):
        client = FakeGeminiClient(files=FakeFiles(list_error=RuntimeError("permission denied")))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            with pytest.raises(FileListingError, match="permission denied"):
                await check_info_files_presence("key", [2016])

    @pytest.mark.asyncio
    async def test_listing_error_without_message_uses_fallback(self):
        client = FakeGeminiClient(files=FakeFiles(list_error=RuntimeError()))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            with pytest.raises(FileListingError, match="Could not list Gemini files."):
                await check_info_files_presence("key", [2016])

    @pytest.mark.asyncio
    async def test_mid_stream_error_fails_whole_check(self):
        pager = FakePager(
            [listed_file("files/2016-info"), listed_file("files/2017-info")],
            error_after=1,
            error=RuntimeError(),
        )
        client = FakeGeminiClient(files=FakeFiles(pager=pager))
        with patch("context_layer.reference_resolver.create_gemini_client", return_value=client):
            with pytest.raises(FileListingError, match="Gemini file iteration failed."):
                await check_info_files_presence("key", [2016, 2017])
