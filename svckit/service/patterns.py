"""Classify native tool output by known phrases.

Each engine keeps ordered tables of :class:`OutputRule`. The first rule whose
phrases all occur in the output wins, so tables list the most specific rule
first. Output no rule recognises is left to the caller, which treats it as a
generic failure.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class OutputRule:
    phrases: tuple[str, ...]
    error: type[Exception] | None = None  # None: the output means success

    def matches(self, output: str) -> bool:
        return all(phrase in output for phrase in self.phrases)


def match_rule(output: str, rules: tuple[OutputRule, ...]) -> OutputRule | None:
    """Return the first rule matching *output*, or None."""
    for rule in rules:
        if rule.matches(output):
            return rule
    return None
