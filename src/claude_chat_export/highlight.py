"""Best-effort syntax highlighting for fenced code and tool code panels.

Not a lexer for any language: a left-to-right scan that classifies comments,
strings, numbers and keywords so that keywords inside strings or comments are
never highlighted. Unknown languages fall back to a small generic keyword set.
"""

import re
from dataclasses import dataclass


# =============================================================================
# LANGUAGE TABLES
# =============================================================================

KEYWORDS: dict[str, frozenset[str]] = {
    "js": frozenset({
        "const", "let", "var", "function", "return", "if", "else", "for", "while",
        "class", "import", "export", "from", "default", "async", "await", "new",
        "try", "catch", "throw", "typeof", "instanceof", "in", "of", "switch",
        "case", "break", "continue", "do", "this", "super", "extends", "yield",
        "delete", "void", "null", "undefined", "true", "false",
    }),
    "python": frozenset({
        "def", "class", "if", "elif", "else", "for", "while", "import", "from",
        "return", "try", "except", "raise", "with", "as", "in", "not", "and", "or",
        "is", "None", "True", "False", "self", "lambda", "yield", "pass", "break",
        "continue", "global", "nonlocal", "async", "await", "print",
    }),
    "bash": frozenset({
        "if", "then", "else", "fi", "for", "do", "done", "while", "case", "esac",
        "function", "return", "echo", "exit", "export", "source", "local",
        "readonly", "declare", "set", "unset", "cd", "ls", "grep", "awk", "sed",
        "cat", "mkdir", "rm", "cp", "mv", "chmod", "chown",
    }),
    "default": frozenset({
        "function", "return", "if", "else", "for", "while", "class", "import",
        "export", "const", "let", "var", "new", "try", "catch", "throw", "true",
        "false", "null", "void", "this", "async", "await", "def", "self", "None",
        "print",
    }),
}

LANGUAGE_ALIASES: dict[str, str] = {
    "javascript": "js",
    "typescript": "js",
    "jsx": "js",
    "tsx": "js",
    "py": "python",
    "sh": "bash",
    "shell": "bash",
    "zsh": "bash",
}

PLAIN_LANGUAGES = frozenset({"", "text", "plaintext"})


def normalize_language(lang: str) -> str:
    """Map a fence language tag onto a KEYWORDS key."""
    tag = (lang or "").strip().lower()
    tag = LANGUAGE_ALIASES.get(tag, tag)
    return tag if tag in KEYWORDS else "default"


def _keyword_pattern(words: frozenset[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(w) for w in sorted(words, key=lambda w: (-len(w), w)))
    return re.compile(rf"\b(?:{alternatives})\b")


_KEYWORD_PATTERNS: dict[str, re.Pattern] = {
    name: _keyword_pattern(words) for name, words in KEYWORDS.items()
}


# =============================================================================
# TOKENIZER
# =============================================================================

COMMENT = "comment"
STRING = "string"
NUMBER = "number"
KEYWORD = "keyword"
PLAIN = "plain"


@dataclass(frozen=True)
class TokenSpan:
    """A classified slice of the input. Spans partition the input exactly."""
    category: str  # comment, string, number, keyword or plain
    text: str


# Tried in order at each scan position; the first match wins.
_LINE_COMMENT = re.compile(r"//[^\n]*|#(?!!/)[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_STRING = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'|`(?:[^`\\]|\\.)*`', re.DOTALL)
_NUMBER = re.compile(r"\b\d+\.?\d*(?:e[+-]?\d+)?\b")

_RULES: tuple[tuple[str, re.Pattern], ...] = (
    (COMMENT, _LINE_COMMENT),
    (COMMENT, _BLOCK_COMMENT),
    (STRING, _STRING),
    (NUMBER, _NUMBER),
)


def tokenize(code: str, lang: str) -> list[TokenSpan]:
    """Split code into classified spans.

    Patterns are matched at the scan position against the whole string, so
    word boundaries see the real preceding character: `x1` and `elifx` stay
    plain. Consecutive unmatched characters are merged into one plain span.
    """
    keyword = _KEYWORD_PATTERNS[normalize_language(lang)]
    rules = _RULES + ((KEYWORD, keyword),)

    spans: list[TokenSpan] = []
    plain_start = -1
    pos = 0
    end = len(code)

    while pos < end:
        for category, pattern in rules:
            m = pattern.match(code, pos)
            if m and m.end() > pos:
                if plain_start >= 0:
                    spans.append(TokenSpan(PLAIN, code[plain_start:pos]))
                    plain_start = -1
                spans.append(TokenSpan(category, m.group(0)))
                pos = m.end()
                break
        else:
            if plain_start < 0:
                plain_start = pos
            pos += 1

    if plain_start >= 0:
        spans.append(TokenSpan(PLAIN, code[plain_start:]))

    return spans


def highlight_syntax(code: str, lang: str) -> str:
    """Wrap classified spans of already-escaped code in hl-* spans.

    Plain-text languages are returned verbatim. The caller escapes.
    """
    if (lang or "").strip().lower() in PLAIN_LANGUAGES:
        return code

    parts: list[str] = []
    for span in tokenize(code, lang):
        if span.category == PLAIN:
            parts.append(span.text)
        else:
            parts.append(f'<span class="hl-{span.category}">{span.text}</span>')
    return "".join(parts)
