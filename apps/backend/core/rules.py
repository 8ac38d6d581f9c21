"""
Ordered regex rule tables.

A rule table is a list of named patterns evaluated in order; the first rule
that produces a non-empty value wins. URL hints, skill cue phrases and salary
patterns are all expressed this way so each rule can be tested on its own.
"""
import re
import logging
from typing import Callable, Iterable, List, Optional, Pattern, Union

logger = logging.getLogger(__name__)

Producer = Callable[["re.Match"], Optional[str]]


def first_group(match: "re.Match") -> Optional[str]:
    """Return the first non-empty capture group, or the whole match."""
    for group in match.groups():
        if group:
            return group
    return match.group(0) if not match.groups() else None


def constant(value: str) -> Producer:
    """Producer that ignores the match and yields a fixed value."""
    return lambda match: value


class Rule:
    """A single named pattern with a value producer."""

    def __init__(
        self,
        name: str,
        pattern: Union[str, Pattern],
        produce: Optional[Producer] = None,
        flags: int = re.IGNORECASE,
    ):
        self.name = name
        self.pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
        self.produce = produce or first_group

    def apply(self, text: str) -> Optional[str]:
        """Return the produced value for the first match in text, if any."""
        match = self.pattern.search(text)
        if not match:
            return None
        value = self.produce(match)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def apply_all(self, text: str) -> List[str]:
        """Return produced values for every match in text."""
        values = []
        for match in self.pattern.finditer(text):
            value = self.produce(match)
            if value and value.strip():
                values.append(value.strip())
        return values

    def __repr__(self):
        return f"<Rule(name={self.name}, pattern={self.pattern.pattern!r})>"


class RuleTable:
    """First-match-wins evaluation over an ordered list of rules."""

    def __init__(self, name: str, rules: Iterable[Rule]):
        self.name = name
        self.rules: List[Rule] = list(rules)

    def first(self, text: Optional[str]) -> Optional[str]:
        """Value of the first rule that matches text."""
        if not text:
            return None
        for rule in self.rules:
            value = rule.apply(text)
            if value:
                logger.debug(f"[rules:{self.name}] matched {rule.name}")
                return value
        return None

    def all(self, text: Optional[str]) -> List[str]:
        """Values of every match of every rule, in rule order."""
        if not text:
            return []
        values: List[str] = []
        for rule in self.rules:
            values.extend(rule.apply_all(text))
        return values

    def __repr__(self):
        return f"<RuleTable(name={self.name}, rules={len(self.rules)})>"
