from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class ReferenceDocument:
    """A Gemini file handle for one year's info file."""

    year: int
    uri: str
    mime_type: str


@dataclass
class DraftResult:
    sql: str
    explanation: str = ""

    def to_dict(self) -> dict:
        return {"sql": self.sql, "explanation": self.explanation}


@dataclass
class FilePresenceReport:
    """Which of the requested years already have an info file on Gemini."""

    statuses: Dict[int, bool] = field(default_factory=dict)
    found_years: List[int] = field(default_factory=list)
