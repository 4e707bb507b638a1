import pytest

from services.text_normalizer import normalize, validate_text_quality, word_count


def test_normalize_line_breaks():
    assert normalize("a\r\nb\rc") == "a\nb\nc"


def test_normalize_collapses_blank_lines_and_spaces():
    assert normalize("a\n\n\n\nb") == "a\n\nb"
    assert normalize("a    b\t\tc") == "a b c"


def test_normalize_page_breaks_and_nbsp():
    assert normalize("one\ftwo") == "onetwo"
    assert normalize("a\u00a0b") == "a b"
    assert normalize("x \u00a0y") == "x y"


def test_normalize_typographic_punctuation():
    assert normalize("“Hi” it’s") == '"Hi" it\'s'
    assert normalize("2019–2020 — now") == "2019-2020 -- now"
    assert normalize("wait…") == "wait..."
    assert normalize("● Built APIs") == "• Built APIs"


def test_normalize_filler_runs():
    assert normalize("Skills........Python") == "Skills...Python"
    assert normalize("------") == "--"
    assert normalize("Name ______") == "Name __"


def test_normalize_removes_page_lines():
    text = "Intro\nPage 1 of 2\nMore\n3\nEnd"
    assert normalize(text) == "Intro\n\nMore\n\nEnd"


def test_normalize_removes_page_lines_with_unusual_padding():
    assert normalize("Jane Doe\n\n2\x0b") == "Jane Doe"
    assert normalize("Jane Doe\n12\u2028") == "Jane Doe"
    assert normalize("Summary\n\nPage 1 of 2\u3000") == "Summary"
    assert normalize("1\x1c") == ""


def test_normalize_truncates_at_footer():
    text = "John Smith\nPython developer\nConfidential and Proprietary - do not share\nmore"
    assert normalize(text) == "John Smith\nPython developer"
    assert normalize("Jane\nThis email and any attachments are private") == "Jane"


def test_normalize_trims():
    assert normalize("   padded   ") == "padded"


@pytest.mark.parametrize("value", ["", None, 42, "\f\f\f", "  ", "Page 3 of 9"])
def test_normalize_degenerate_input(value):
    assert normalize(value) == ""


IDEMPOTENCE_SAMPLES = [
    "",
    "\f",
    "a  b",
    "Confidential  and Proprietary rest",
    "xyz\n12 Confidential and Proprietary",
    "Page  1 of 2",
    "Intro\n\n \n\n\nPage 2 of 5\n7\nBody",
    "Title————\nText.....\n▪ item\r\n\r\n\r\n\r\nEnd",
    "John Smith\nAustin, TX\n\nExperience\n  Senior Engineer at Acme Corp  \n\n\n\n",
    "Jane Doe\n\n2\x0b",
    "Jane Doe\n12\u2028",
    "Summary\n\nPage 1 of 2\u3000",
    "1\x1c",
    "\x0b\n7\x1c\nBody\n\u3000 3",
]


@pytest.mark.parametrize("text", IDEMPOTENCE_SAMPLES)
def test_normalize_is_idempotent(text):
    once = normalize(text)
    assert normalize(once) == once


def test_word_count():
    assert word_count("one two\nthree") == 3
    assert word_count("") == 0


# --- Quality validation ---


def test_validate_text_quality_empty():
    report = validate_text_quality("")
    assert report.is_valid is False
    assert report.issues == ["No text provided"]


def test_validate_text_quality_too_short():
    report = validate_text_quality("Short text here.")
    assert report.is_valid is False
    assert any("too short" in issue for issue in report.issues)


def test_validate_text_quality_good_resume():
    text = (
        "Senior backend engineer with eight years building payment platforms. "
        "Designed distributed services handling millions of daily transactions. "
        "Mentored junior developers and introduced automated testing practices. "
        "Migrated legacy infrastructure onto managed cloud databases."
    )
    report = validate_text_quality(text)
    assert report.is_valid is True
    assert report.warnings == []
    assert report.stats.word_count == len(text.split())


def test_validate_text_quality_flags_repetition():
    report = validate_text_quality("data " * 60)
    assert "High repetition detected - possible OCR issues" in report.warnings


def test_validate_text_quality_flags_special_characters():
    text = "Experienced engineer ### @@@ $$$ %%% ^^^ &&& *** ||| ~~~ {{{ }}} [[[ ]]] <<< >>> working."
    report = validate_text_quality(text)
    assert "High number of special characters - possible extraction issues" in report.warnings
