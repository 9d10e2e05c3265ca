"""
Reference document (info file) lookups against the Gemini file store.

Each survey year can have one info file, named {year}-info, describing the
columns and value codes of that year's table. Info files are optional
context: a missing file for one year never blocks the others.
"""

import asyncio
from typing import List, Tuple

from analytics_engine.survey_years import INFO_FILE_YEARS, info_file_name
from drafting_layer.errors import FileListingError, MissingCredentialError
from drafting_layer.gemini_client import create_gemini_client, resolve_api_key
from drafting_layer.models import FilePresenceReport, ReferenceDocument
from utils.settings import load_config


async def _fetch_info_file(client, year: int, default_mime_type: str) -> ReferenceDocument:
    file = await client.aio.files.get(name=info_file_name(year))
    if not getattr(file, "uri", None):
        raise ValueError("missing uri")
    return ReferenceDocument(
        year=year,
        uri=file.uri,
        mime_type=getattr(file, "mime_type", None) or default_mime_type,
    )


async def resolve_reference_documents(client, loaded_years) -> Tuple[List[ReferenceDocument], List[int]]:
    """
    Fetch the info files for every loaded year that has one.

    Args:
        client: Gemini client (only client.aio.files.get is used)
        loaded_years: Years whose tables are currently loaded

    Returns:
        (documents, attached_years) for the lookups that succeeded. Failed
        lookups are dropped; attached_years follows lookup order, so sort it
        if order matters.
    """
    loaded = set(loaded_years or [])
    target_years = [year for year in INFO_FILE_YEARS if year in loaded]

    # Nothing to look up, skip the network entirely
    if not target_years:
        return [], []

    default_mime_type = load_config("files").get("default_mime_type", "text/plain")

    results = await asyncio.gather(
        *(_fetch_info_file(client, year, default_mime_type) for year in target_years),
        return_exceptions=True,
    )

    documents = []
    attached_years = []
    for year, result in zip(target_years, results):
        if isinstance(result, BaseException):
            print(f"⚠️  Info file {info_file_name(year)} not attached: {result}")
            continue
        documents.append(result)
        attached_years.append(year)

    return documents, attached_years


async def check_info_files_presence(api_key=None, years=None) -> FilePresenceReport:
    """
    Report which of the given years already have an info file on Gemini.

    Unlike resolve_reference_documents this does not tolerate partial
    failure: if the listing cannot be completed the whole check fails with
    FileListingError, since an incomplete listing would report false
    absences.

    Raises:
        MissingCredentialError: no API key supplied (before any remote call)
        FileListingError: the listing request or its iteration failed
    """
    api_key = resolve_api_key(api_key)
    if not api_key:
        raise MissingCredentialError("Gemini API key required to check files.")

    years = [int(year) for year in years or []]
    page_size = load_config("files").get("list_page_size", 100)
    client = create_gemini_client(api_key)

    try:
        pager = await client.aio.files.list(config={"page_size": page_size})
    except Exception as e:
        raise FileListingError(str(e) or "Could not list Gemini files.") from e

    targets = [info_file_name(year).lower() for year in years]
    found = {}

    try:
        async for file in pager:
            display = (getattr(file, "display_name", None) or "").lower()
            name = (getattr(file, "name", None) or "").lower()
            for year, target in zip(years, targets):
                if display == target or name.endswith(target):
                    found[year] = True
    except Exception as e:
        raise FileListingError(str(e) or "Gemini file iteration failed.") from e

    statuses = {year: year in found for year in years}
    return FilePresenceReport(statuses=statuses, found_years=list(found))
