"""Tests for the keyword/string/comment/number tokenizer."""

import random

import pytest

from claude_chat_export.highlight import (
    KEYWORDS,
    TokenSpan,
    highlight_syntax,
    normalize_language,
    tokenize,
)


# ─── coverage ──────────────────────────────────────────────────────────────


SAMPLES = [
    "",
    "x",
    'const s = "if (x) { return 1 }"; // trailing',
    "def f(x):\n    # comment with if\n    return x + 1.5e3\n",
    "echo 'unterminated\nfi",
    "/* block\n comment */ let a = `tpl ${b}`;",
    'print("escaped \\" quote")',
    "#!/bin/bash\necho $HOME",
    "elifx x1 1x _2 3.14",
]


class TestCoverage:
    @pytest.mark.parametrize("code", SAMPLES)
    @pytest.mark.parametrize("lang", ["js", "python", "bash", "rust", "TypeScript", ""])
    def test_spans_reconstruct_input(self, code, lang):
        assert "".join(s.text for s in tokenize(code, lang)) == code

    def test_random_inputs_reconstruct(self):
        rng = random.Random(1234)
        alphabet = "abcdefif \n\t\"'`/*#0123456789.e+-_\\"
        for _ in range(300):
            code = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40)))
            lang = rng.choice(["js", "py", "sh", "go", "plaintext"])
            assert "".join(s.text for s in tokenize(code, lang)) == code

    def test_no_empty_spans(self):
        for code in SAMPLES:
            assert all(s.text for s in tokenize(code, "js"))

    def test_plain_runs_are_merged(self):
        spans = tokenize("foo bar", "python")
        assert spans == [TokenSpan("plain", "foo bar")]


# ─── classification ────────────────────────────────────────────────────────


class TestClassification:
    def test_keyword_number_and_plain(self):
        assert tokenize("return 42", "js") == [
            TokenSpan("keyword", "return"),
            TokenSpan("plain", " "),
            TokenSpan("number", "42"),
        ]

    def test_keyword_inside_string_is_not_highlighted(self):
        assert highlight_syntax('"if"', "js") == '<span class="hl-string">"if"</span>'

    def test_keyword_inside_comment_is_not_highlighted(self):
        assert highlight_syntax("# if x", "python") == '<span class="hl-comment"># if x</span>'

    def test_block_comment(self):
        spans = tokenize("/* a\nb */x", "js")
        assert spans[0] == TokenSpan("comment", "/* a\nb */")

    def test_keyword_prefix_of_identifier_stays_plain(self):
        assert tokenize("elifx", "python") == [TokenSpan("plain", "elifx")]

    def test_digit_inside_identifier_is_not_a_number(self):
        assert tokenize("x1", "python") == [TokenSpan("plain", "x1")]

    def test_decimal_and_exponent(self):
        categories = [s.category for s in tokenize("3.14 2e10", "js")]
        assert categories == ["number", "plain", "number"]

    def test_shebang_is_not_a_comment(self):
        spans = tokenize("#!/bin/bash", "bash")
        assert all(s.category != "comment" for s in spans)

    def test_unterminated_string_degrades_to_plain(self):
        spans = tokenize('"abc', "js")
        assert "".join(s.text for s in spans) == '"abc'
        assert all(s.category != "string" for s in spans)


# ─── languages ─────────────────────────────────────────────────────────────


class TestLanguages:
    @pytest.mark.parametrize("lang", ["", "text", "plaintext", "TEXT"])
    def test_plain_languages_are_identity(self, lang):
        code = 'if x: return "y"  # 1'
        assert highlight_syntax(code, lang) == code

    @pytest.mark.parametrize("alias,canonical", [
        ("javascript", "js"), ("typescript", "js"), ("jsx", "js"), ("tsx", "js"),
        ("py", "python"), ("sh", "bash"), ("shell", "bash"), ("zsh", "bash"),
        ("Python", "python"), ("rust", "default"),
    ])
    def test_normalize_language(self, alias, canonical):
        assert normalize_language(alias) == canonical

    def test_alias_uses_language_keywords(self):
        assert '<span class="hl-keyword">elif</span>' in highlight_syntax("elif x", "py")
        assert "hl-keyword" not in highlight_syntax("elif x", "js")

    def test_unknown_language_uses_default_keywords(self):
        assert '<span class="hl-keyword">return</span>' in highlight_syntax("return x", "rust")

    def test_keyword_tables_are_static(self):
        assert set(KEYWORDS) == {"js", "python", "bash", "default"}
        assert all(isinstance(words, frozenset) for words in KEYWORDS.values())
