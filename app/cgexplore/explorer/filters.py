"""Include filters for cgroup paths.

Globs follow ``fnmatch`` syntax and are matched case-sensitively
against the cgroup path relative to the walked root. ``*`` also
matches ``/``, so ``user.slice/*`` matches every cgroup below
``user.slice``. A ``**`` path component matches zero or more whole
directories: ``**/job1`` matches ``job1`` as well as ``a/b/job1``.
Regular expressions use ``re.search``.
"""

import fnmatch
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath


class PatternKind(str, Enum):
    """Kind of include pattern."""

    GLOB = "glob"
    REGEX = "regex"


class PatternError(ValueError):
    """Raised when an include pattern cannot be compiled.

    Attributes:
        pattern: The offending pattern string.
        kind: Whether the pattern is a glob or a regex.
        reason: Description of the syntax error.
    """

    def __init__(self, pattern: str, kind: PatternKind, reason: str) -> None:
        self.pattern = pattern
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid include {kind.value} {pattern!r}: {reason}")


def _check_glob_syntax(pattern: str) -> None:
    """Reject glob constructs that fnmatch would silently accept.

    Raises:
        PatternError: On an unterminated character class or a
            malformed recursive wildcard.
    """
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            # A leading ']' is a literal member of the class
            if j < n and pattern[j] == "]":
                j += 1
            j = pattern.find("]", j)
            if j == -1:
                raise PatternError(
                    pattern, PatternKind.GLOB, f"invalid range pattern at position {i}"
                )
            i = j + 1
            continue
        if char == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            run = j - i
            if run > 2:
                raise PatternError(
                    pattern,
                    PatternKind.GLOB,
                    f"wildcards are either regular '*' or recursive '**' (position {i})",
                )
            if run == 2:
                before_ok = i == 0 or pattern[i - 1] == "/"
                after_ok = j == n or pattern[j] == "/"
                if not (before_ok and after_ok):
                    raise PatternError(
                        pattern,
                        PatternKind.GLOB,
                        f"recursive wildcards must form a single path component (position {i})",
                    )
            i = j
            continue
        i += 1


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern.

    Args:
        pattern: Glob pattern string.

    Returns:
        Compiled regular expression equivalent to the glob.

    Raises:
        PatternError: If the glob is malformed.
    """
    _check_glob_syntax(pattern)
    try:
        return re.compile(_translate_glob(pattern))
    except re.error as e:
        raise PatternError(pattern, PatternKind.GLOB, str(e)) from e


# fnmatch.translate() wraps its output as "(?s:BODY)\Z" ("\z" on 3.14+)
_FNMATCH_WRAPPER = re.compile(r"\(\?s:(?P<body>.*)\)\\[Zz]", re.DOTALL)


def _translate_component(component: str) -> str:
    """Translate one non-recursive path component to a regex body."""
    translated = fnmatch.translate(component)
    match = _FNMATCH_WRAPPER.fullmatch(translated)
    if match is None:
        raise re.error(f"unexpected fnmatch translation {translated!r}")
    return match.group("body")


def _translate_glob(pattern: str) -> str:
    """Translate a syntax-checked glob to a regex source.

    A ``**`` component followed by ``/`` becomes ``(?:.*/)?`` so that it
    may stand for no directory at all. A trailing ``**`` matches the
    rest of the path. Everything else goes through fnmatch.
    """
    components = pattern.split("/")
    if "**" not in components:
        return fnmatch.translate(pattern)

    parts: list[str] = []
    last = len(components) - 1
    for index, component in enumerate(components):
        if component == "**":
            parts.append(".*" if index == last else "(?:.*/)?")
            continue
        parts.append(_translate_component(component))
        if index != last:
            parts.append("/")
    return "(?s:" + "".join(parts) + r")\Z"


def compile_regex(pattern: str) -> re.Pattern[str]:
    """Compile a regular expression.

    Raises:
        PatternError: If the expression is malformed.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(pattern, PatternKind.REGEX, str(e)) from e


@dataclass(frozen=True, slots=True)
class PatternFilter:
    """Decides whether a relative cgroup path is included.

    An empty filter includes everything. Otherwise a path is included
    if it matches any glob or any regex.

    Attributes:
        globs: Compiled glob patterns (full match).
        regexes: Compiled regular expressions (search anywhere).
    """

    globs: tuple[re.Pattern[str], ...] = ()
    regexes: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def compile(
        cls,
        globs: Iterable[str] = (),
        regexes: Iterable[str] = (),
    ) -> "PatternFilter":
        """Compile raw pattern strings into a filter.

        Globs are compiled before regexes; the first failure is raised.

        Raises:
            PatternError: If any pattern is malformed.
        """
        return cls(
            globs=tuple(compile_glob(p) for p in globs),
            regexes=tuple(compile_regex(p) for p in regexes),
        )

    @property
    def is_empty(self) -> bool:
        """Check if no pattern is configured."""
        return not self.globs and not self.regexes

    def matches(self, relative_path: PurePath | str) -> bool:
        """Check if a path relative to the walked root is included."""
        if self.is_empty:
            return True
        path_str = str(relative_path)
        if any(glob.match(path_str) for glob in self.globs):
            return True
        return any(regex.search(path_str) for regex in self.regexes)
