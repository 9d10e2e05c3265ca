DRAFTING_PREAMBLE = "You are an expert data analyst writing DuckDB SQL only."

NO_SAMPLE_ROWS = "Sample rows not provided."

NO_TABLES_LOADED = "None loaded yet."

INFO_FILES_ATTACHED = (
    "Info files attached for: {info_files}. "
    "Use these for column descriptions and value meanings."
)

NO_INFO_FILES = (
    "No info files attached. If available, rely on sample rows and table names."
)

CROSS_YEAR_RULE = (
    "Cross-year queries require you to explicitly reference multiple tables "
    "(e.g., UNION ALL over brfss_2018 and brfss_2019, adding a survey_year column)."
)

OUTPUT_FORMAT = """Return your response in exactly this format:
SQL:
<DuckDB SQL only, no markdown fences>

EXPLANATION:
<1-2 sentences describing what the query returns>
"""

DRAFTING_PROMPT_TEMPLATE = """{preamble}

Dataset summary:
Available tables (one per year): {available_tables}
{info_files_note}
{cross_year_rule}
Sample rows (from the first loaded table):
{sample_text}

User request: {request}

{output_format}"""
