import json
import re
from google.genai import types

from analytics_engine.survey_years import info_file_name, normalize_years, table_name
from context_layer.reference_resolver import resolve_reference_documents
from drafting_layer.drafting_prompt import (
    CROSS_YEAR_RULE,
    DRAFTING_PREAMBLE,
    DRAFTING_PROMPT_TEMPLATE,
    INFO_FILES_ATTACHED,
    NO_INFO_FILES,
    NO_SAMPLE_ROWS,
    NO_TABLES_LOADED,
    OUTPUT_FORMAT,
)
from drafting_layer.errors import DraftingError, EmptyResponseError
from drafting_layer.gemini_client import create_gemini_client, get_model_name, resolve_api_key
from drafting_layer.models import DraftResult
from utils.settings import load_config

CODE_FENCE_PATTERN = re.compile(r"```sql", re.IGNORECASE)
SQL_SECTION_PATTERN = re.compile(r"SQL:\s*(.*?)(?:EXPLANATION:|\Z)", re.IGNORECASE | re.DOTALL)
EXPLANATION_SECTION_PATTERN = re.compile(r"EXPLANATION:\s*(.*)", re.IGNORECASE | re.DOTALL)


def render_sample_rows(sample_rows, limit: int = 6) -> str:
    """Number the first `limit` rows, one JSON object per line."""
    if not sample_rows:
        return NO_SAMPLE_ROWS

    # default=str turns numpy ints, Decimals, timestamps etc. into plain text
    return "\n".join(
        f"{idx}. {json.dumps(row, default=str, ensure_ascii=False)}"
        for idx, row in enumerate(list(sample_rows)[:limit], start=1)
    )


def render_available_tables(loaded_years) -> str:
    years = normalize_years(loaded_years)
    if not years:
        return NO_TABLES_LOADED
    return ", ".join(table_name(year) for year in years)


def render_info_files_note(attached_years) -> str:
    if not attached_years:
        return NO_INFO_FILES
    info_files = ", ".join(info_file_name(year) for year in sorted(attached_years))
    return INFO_FILES_ATTACHED.format(info_files=info_files)


def build_drafting_prompt(request: str, available_tables: str, info_files_note: str, sample_text: str) -> str:
    return DRAFTING_PROMPT_TEMPLATE.format(
        preamble=DRAFTING_PREAMBLE,
        available_tables=available_tables,
        info_files_note=info_files_note,
        cross_year_rule=CROSS_YEAR_RULE,
        sample_text=sample_text,
        request=request,
        output_format=OUTPUT_FORMAT,
    )


def parse_draft_response(response_text: str) -> DraftResult:
    """
    Split a Gemini reply into SQL and explanation.

    Never raises. Markdown fences are removed first; without an SQL: label
    the whole reply is taken as the SQL, and without an EXPLANATION: label
    the explanation is empty.
    """
    cleaned = CODE_FENCE_PATTERN.sub("", response_text or "").replace("```", "").strip()

    sql_match = SQL_SECTION_PATTERN.search(cleaned)
    explanation_match = EXPLANATION_SECTION_PATTERN.search(cleaned)

    sql = (sql_match.group(1).strip() if sql_match else "") or cleaned
    explanation = explanation_match.group(1).strip() if explanation_match else ""

    return DraftResult(sql=sql, explanation=explanation)


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error) or "Gemini request failed."


async def draft_sql(api_key, prompt: str, sample_rows=None, loaded_years=None) -> DraftResult:
    """
    Draft DuckDB SQL for a plain-language request using Gemini.

    Args:
        api_key: Gemini API key (falls back to the configured env variable)
        prompt: The user's request
        sample_rows: Pre-fetched rows from the first loaded table
        loaded_years: Years whose brfss_{year} tables are loaded right now

    Returns:
        DraftResult with the SQL and a short explanation

    Raises:
        DraftingError: the Gemini request failed (message starts "Gemini error:")
        EmptyResponseError: Gemini returned no text

    CRITICAL: The SQL is neither validated nor executed here.
    """
    config = load_config("llm")
    row_limit = load_config("sampling").get("prompt_row_limit", 6)
    loaded_years = normalize_years(loaded_years)

    sample_text = render_sample_rows(sample_rows, limit=row_limit)
    available_tables = render_available_tables(loaded_years)

    # A missing key surfaces like any other failed request
    try:
        client = create_gemini_client(resolve_api_key(api_key, config))
    except Exception as e:
        raise DraftingError(f"Gemini error: {_error_message(e)}") from e

    documents, attached_years = await resolve_reference_documents(client, loaded_years)
    info_files_note = render_info_files_note(attached_years)

    user_prompt = build_drafting_prompt(prompt, available_tables, info_files_note, sample_text)

    info_parts = [
        types.Part.from_uri(file_uri=doc.uri, mime_type=doc.mime_type)
        for doc in documents
    ]

    try:
        response = await client.aio.models.generate_content(
            model=get_model_name(config),
            contents=[*info_parts, info_files_note, user_prompt],
        )
    except Exception as e:
        raise DraftingError(f"Gemini error: {_error_message(e)}") from e

    raw = getattr(response, "text", None) or ""
    print(f"✓ Gemini replied with {len(raw)} characters")
    if not raw.strip():
        raise EmptyResponseError("Gemini did not return any text.")

    result = parse_draft_response(raw)
    # A reply of bare code fences leaves nothing behind once they are stripped
    if not result.sql:
        raise EmptyResponseError("Gemini did not return any text.")

    return result
