from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRule:
    """A compiled pattern plus the reason it exists. Guards take these as plain data."""

    pattern: re.Pattern[str]
    purpose: str

    def search(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def rule(regex: str, purpose: str, flags: int = re.IGNORECASE) -> PatternRule:
    return PatternRule(pattern=re.compile(regex, flags), purpose=purpose)
