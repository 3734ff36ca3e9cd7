import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

HaystackIndex = FrozenSet[str]

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class ClassificationResult:
    """Original needle lines, split by verdict, each in needle-file order."""
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)

    def select(self, found: bool) -> List[str]:
        return self.found if found else self.missing

    def __len__(self):
        return len(self.found) + len(self.missing)


def split_lines(text: str) -> List[str]:
    """
    Split on LF, CRLF and lone CR. A trailing line break does not open a new
    (empty) line, so ``"a\\n"`` is one line and ``""`` is none.
    """
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def comparison_key(line: str, length_limit: Optional[int] = None) -> str:
    # trim, then NFC, then truncate
    key = unicodedata.normalize("NFC", line.strip())
    if length_limit is not None:
        key = key[:length_limit]
    return key


def index_lines(lines: Iterable[str], length_limit: Optional[int] = None) -> HaystackIndex:
    keys = (comparison_key(line, length_limit) for line in lines)
    return frozenset(key for key in keys if key)


def build_index(haystack_text: str, length_limit: Optional[int] = None) -> HaystackIndex:
    return index_lines(split_lines(haystack_text), length_limit)


def classify_lines(lines: Iterable[str], index: HaystackIndex,
                   length_limit: Optional[int] = None) -> ClassificationResult:
    """
    Classify needle ``lines`` against ``index``. Lines whose key is empty are
    always counted as found. ``lines`` may be any iterable (e.g. a progress bar).
    """
    result = ClassificationResult()
    trace = logger.isEnabledFor(logging.DEBUG)
    for i, line in enumerate(lines):
        key = comparison_key(line, length_limit)
        present = not key or key in index
        if present:
            result.found.append(line)
        else:
            result.missing.append(line)

        if trace:
            logger.debug(f"line {i}: {key!r}")
            logger.debug(f"hex: {key.encode('utf-8').hex(' ')}")
            logger.debug("found" if present else "not found")
    return result


def classify(needle_text: str, index: HaystackIndex,
             length_limit: Optional[int] = None) -> ClassificationResult:
    return classify_lines(split_lines(needle_text), index, length_limit)
