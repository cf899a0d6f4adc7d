import html
import io
import re
import sys
from typing import Iterator

from ftfy import fix_text

from wordcount.paths import ENCODING, ENCODING_ERRORS, STDIN_PATH

# keep U.S., 3.14, covid-19 etc. as whole words
WORD_RE = re.compile(r"[a-z0-9]+(?:[.-][a-z0-9]+)*")

MODES = ("line", "words")


class Parser:
    """
    Turns raw input lines into tokens.

    Modes:
    - "line":  every non-blank line (surrounding whitespace stripped) is one token
    - "words": the line is cleaned (ftfy + html unescape), lowercased and split
               into words; every word is a token

    With fix_text=True, "line" mode also runs the ftfy/html cleanup before stripping.
    """

    def __init__(self, mode: str = "line", fix_text: bool = False):
        if mode not in MODES:
            raise ValueError(f"unknown tokenize mode {mode!r}, expected one of {MODES}")
        self.mode = mode
        self.fix_text = fix_text

    @staticmethod
    def clean(text: str) -> str:
        """Fix mojibake and HTML entities."""
        return fix_text(html.unescape(text))

    def tokenize(self, text: str) -> list[str]:
        """
        Clean and tokenize a raw text string.
        Returns [] if nothing remains after tokenization.
        """
        return WORD_RE.findall(self.clean(text).lower())

    def parse_line(self, line: str) -> list[str]:
        if self.mode == "words":
            return self.tokenize(line)
        if self.fix_text:
            line = self.clean(line)
        token = line.strip()
        return [token] if token else []

    def iter_tokens(self, lines) -> Iterator[str]:
        for line in lines:
            yield from self.parse_line(line)


def iter_tokens(path: str, mode: str = "line", fix_text: bool = False) -> Iterator[str]:
    """
    Stream tokens from a text file (or stdin for "-").

    Lazy and single-pass: the file is opened on first use and closed when
    the generator is exhausted or closed.
    """
    parser = Parser(mode=mode, fix_text=fix_text)
    if path == STDIN_PATH:
        stdin = io.TextIOWrapper(sys.stdin.buffer, encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n")
        try:
            yield from parser.iter_tokens(stdin)
        finally:
            # leave sys.stdin.buffer open for the rest of the process
            stdin.detach()
        return
    with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
        yield from parser.iter_tokens(f)
