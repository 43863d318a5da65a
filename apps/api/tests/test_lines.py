"""
Unit tests for line normalization and diacritic folding.
"""
import pytest

from models import Line, OcrResult, Word
from services.diacritics import contains_any, normalize
from services.lines import is_emphasized, normalize_lines, source_text, split_plain_text


class TestDiacriticNormalizer:
    """Test keyword folding."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("YAPILIŞI", "yapilisi"),
            ("İçindekiler:", "icindekiler"),
            ("Hazırlanışı", "hazirlanisi"),
            ("Malzemeler (4 kişilik)", "malzemelerkisilik"),
            ("2 su bardağı", "subardagi"),
            ("Gerekli ÖĞELER", "gerekliogeler"),
            ("", ""),
            ("123 !?", ""),
        ],
    )
    def test_normalize(self, text, expected):
        assert normalize(text) == expected

    def test_contains_any(self):
        assert contains_any("MALZEMELER:", {"malzeme"})
        assert contains_any("Nasıl Yapılır?", {"nasil"})
        assert not contains_any("2 yumurta", {"malzeme"})
        assert not contains_any("", {"malzeme"})


class TestPlainText:
    """Test plain text splitting."""

    def test_split_trims_and_drops_blank_lines(self):
        lines = split_plain_text("  Kek \r\n\r\n\tMalzemeler\n   \n2 yumurta\r1 su bardağı şeker\n")

        assert [line.text for line in lines] == ["Kek", "Malzemeler", "2 yumurta", "1 su bardağı şeker"]
        assert all(line.words is None for line in lines)

    def test_noise_lines_are_kept(self):
        """Short lines are dropped by the classifier, not here."""
        lines = split_plain_text("Kek\n..\nab")
        assert [line.text for line in lines] == ["Kek", "..", "ab"]

    def test_empty_input(self):
        assert split_plain_text("") == []
        assert split_plain_text(None) == []
        assert normalize_lines(None) == []

    def test_renormalizing_output_is_stable(self):
        text = "Mercimek Çorbası\n\n MALZEMELER \n1 su bardağı mercimek\n\n\nYAPILIŞI\n1. Yıkayın.\n"
        first = normalize_lines(text)
        second = normalize_lines("\n".join(line.text for line in first))

        assert len(second) == len(first)
        assert [line.text for line in second] == [line.text for line in first]


class TestRichResult:
    """Test OCR result normalization."""

    def test_words_carry_emphasis(self):
        result = OcrResult(
            text="Kek\n2 su bardağı Un",
            lines=[
                {"text": "Kek"},
                {
                    "text": "2 su bardağı Un",
                    "words": [
                        {"text": "2", "is_bold": False},
                        {"text": "su"},
                        {"text": "bardağı"},
                        {"text": "Un", "is_bold": True},
                    ],
                },
            ],
        )

        lines = normalize_lines(result)

        assert lines[0] == Line(text="Kek", words=None)
        assert lines[1].words == [
            Word(text="2", emphasized=False),
            Word(text="su", emphasized=False),
            Word(text="bardağı", emphasized=False),
            Word(text="Un", emphasized=True),
        ]

    def test_raw_dict_is_accepted(self):
        lines = normalize_lines({"text": "a", "lines": [{"text": " Tuz ", "words": [{"text": "Tuz", "bold": True}]}]})

        assert lines == [Line(text="Tuz", words=[Word(text="Tuz", emphasized=True)])]

    def test_blank_lines_and_words_dropped(self):
        lines = normalize_lines(
            {
                "text": "x",
                "lines": [
                    {"text": "   "},
                    {"text": "", "words": [{"text": "Şeker", "font_weight": 700}, {"text": " "}]},
                ],
            }
        )

        assert lines == [Line(text="Şeker", words=[Word(text="Şeker", emphasized=True)])]

    def test_missing_lines_fall_back_to_text(self):
        lines = normalize_lines(OcrResult(text="Kek\n\nMalzemeler"))

        assert [line.text for line in lines] == ["Kek", "Malzemeler"]
        assert all(line.words is None for line in lines)

    def test_source_text(self):
        assert source_text("abc") == "abc"
        assert source_text(OcrResult(text="full text", lines=[{"text": "x"}])) == "full text"
        assert source_text({"lines": [{"text": "a"}, {"text": "b"}]}) == "a\nb"
        assert source_text(None) == ""
        assert source_text(OcrResult(text=" \n ", lines=[{"text": " a "}, {"text": ""}, {"text": "b"}])) == "a\nb"

    def test_unsupported_source_type(self):
        with pytest.raises(TypeError):
            normalize_lines(42)


class TestEmphasisAdapter:
    """Test collapsing of provider font metadata."""

    @pytest.mark.parametrize(
        "word,expected",
        [
            ({"text": "Un", "emphasized": True}, True),
            ({"text": "Un", "is_bold": True}, True),
            ({"text": "Un", "bold": False}, False),
            ({"text": "Un", "font_weight": 700}, True),
            ({"text": "Un", "font_weight": 400}, False),
            ({"text": "Un", "fontWeight": "bold"}, True),
            ({"text": "Un", "weight": "600"}, True),
            ({"text": "Un", "font_attributes": {"bold": True}}, True),
            ({"text": "Un", "fontAttributes": {"is_bold": False}}, False),
            ({"text": "Un", "flags": 16}, True),
            ({"text": "Un", "flags": 4}, False),
            ({"text": "Un", "font": "Arial-BoldMT"}, True),
            ({"text": "Un", "fontname": "Helvetica"}, False),
            ({"text": "Un"}, False),
        ],
    )
    def test_shapes(self, word, expected):
        assert is_emphasized(word) is expected

    def test_model_word(self):
        result = OcrResult.model_validate({"lines": [{"text": "Un", "words": [{"text": "Un", "fontWeight": 800}]}]})
        assert is_emphasized(result.lines[0].words[0]) is True
