"""
Stage type definitions for the substitution engine.

A stage configuration is resolved once into tagged variants so the engine
never re-checks raw option types while substituting.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class PatternSource:
    """
    Raw pattern source string, handed straight to ``re``.

    Attributes:
        source: Regular expression source text
    """
    source: str

    def compile(self) -> "re.Pattern[str]":
        # re keeps its own cache of compiled sources
        return re.compile(self.source)


@dataclass(frozen=True)
class CompiledPattern:
    """
    Already-compiled pattern, possibly recompiled with configured flags.

    Attributes:
        pattern: Compiled regular expression
    """
    pattern: "re.Pattern[str]"

    def compile(self) -> "re.Pattern[str]":
        return self.pattern


@dataclass(frozen=True)
class MatchRecord:
    """
    Structured view of one match, passed to replacement functions.

    Integer keys index the groups: ``record[0]`` is the whole match and
    ``record[1]`` onwards are the capture groups in order, ``None`` when a
    group did not participate. String keys look up named groups.

    Attributes:
        groups: Whole match followed by every capture group
        index: Offset of the match in the scanned buffer
        input: Full buffer being scanned
        named: Named groups by name
    """
    groups: Tuple[Optional[str], ...]
    index: int
    input: str
    named: Dict[str, Optional[str]] = field(default_factory=dict, hash=False)

    @classmethod
    def from_match(cls, match: "re.Match[str]") -> "MatchRecord":
        return cls(
            groups=(match.group(0),) + match.groups(),
            index=match.start(),
            input=match.string,
            named=match.groupdict()
        )

    def __getitem__(self, key: Union[int, str]) -> Optional[str]:
        if isinstance(key, str):
            return self.named[key]
        return self.groups[key]

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self):
        return iter(self.groups)


@dataclass(frozen=True)
class Literal:
    """
    Replacement template used verbatim by ``re``.

    Backreferences use the ``re`` template syntax (``\\1``, ``\\g<name>``).

    Attributes:
        template: Replacement template
    """
    template: str


@dataclass(frozen=True)
class Adapter:
    """
    Wraps a user replacement function so it receives a MatchRecord.

    Attributes:
        function: Callable taking one MatchRecord and returning the replacement
    """
    function: Callable[[MatchRecord], Any]

    def __call__(self, match: "re.Match[str]") -> str:
        result = self.function(MatchRecord.from_match(match))
        if isinstance(result, str):
            return result
        return str(result)


PatternSpec = Union[PatternSource, CompiledPattern]
ValueSpec = Union[Literal, Adapter]


@dataclass(frozen=True)
class Stage:
    """
    Resolved stage ready for substitution.

    Attributes:
        pattern: Pattern variant to match with
        value: Replacement variant
        index: Position in the 'stages' list, None for a single-stage config
    """
    pattern: PatternSpec
    value: ValueSpec
    index: Optional[int] = None
