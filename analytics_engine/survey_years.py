"""
Known BRFSS survey years and the naming conventions derived from them.

Both lists are fixed for the life of the process. Tables are named
brfss_{year}; info files on the Gemini file store are named {year}-info.
"""

# Years a CSV can be uploaded for
DATASET_YEARS = (2016, 2017, 2018, 2019, 2020, 2021, 2022, 2023)

# Years that have an info file (codebook) uploaded to Gemini
INFO_FILE_YEARS = (2016, 2017, 2018, 2019, 2020, 2021, 2022)


def table_name(year: int) -> str:
    return f"brfss_{year}"


def info_file_name(year: int) -> str:
    return f"{year}-info"


def normalize_years(years) -> list:
    """Return the distinct years as ints, ascending."""
    return sorted({int(year) for year in years or []})
