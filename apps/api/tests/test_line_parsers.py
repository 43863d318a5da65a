"""
Unit tests for the ingredient and step line parsers.
"""
import pytest

from models import IngredientDraft, Line, Section, StepDraft, Word
from services.ingredient_utils import (
    IngredientLineParser,
    is_ingredient_group_header,
    split_by_emphasis,
    strip_markers,
)
from services.parser_context import ParserContext
from services.step_utils import StepLineParser, extract_notes, is_numbered_step, is_step_group_header
from services.vocabulary import ParserVocabulary


@pytest.fixture
def ingredient_parser():
    return IngredientLineParser()


def _words(*pairs):
    return [Word(text=text, emphasized=bold) for text, bold in pairs]


class TestIngredientEmphasisSplit:
    """Bold words are the name, regular words the amount."""

    def test_bold_name_regular_amount(self, ingredient_parser):
        line = Line(
            text="2 su bardağı Un",
            words=_words(("2", False), ("su", False), ("bardağı", False), ("Un", True)),
        )

        assert ingredient_parser.parse_line(line) == IngredientDraft(amount="2 su bardağı", name="Un")

    def test_list_markers_are_ignored(self):
        words = _words(("1)", False), ("200", False), ("gr", False), ("Tereyağı", True))
        assert split_by_emphasis(words) == ("200 gr", "Tereyağı")

    def test_single_weight_falls_back_to_tokens(self, ingredient_parser):
        line = Line(text="3 adet Yumurta", words=_words(("3", True), ("adet", True), ("Yumurta", True)))

        assert ingredient_parser.parse_line(line) == IngredientDraft(amount="3 adet", name="Yumurta")

    def test_marker_only_regular_word_falls_back(self):
        words = _words(("1.", False), ("Tuz", True))
        assert split_by_emphasis(words) is None


class TestIngredientTokenSplit:
    """Quantity/unit prefix consumption without emphasis data."""

    @pytest.mark.parametrize(
        "text,amount,name",
        [
            ("3 adet Yumurta", "3 adet", "Yumurta"),
            ("Tuz", "", "Tuz"),
            ("2 Yumurta", "2", "Yumurta"),
            ("2 su bardağı un", "2 su bardağı", "un"),
            ("Yarım çay kaşığı tuz", "Yarım çay kaşığı", "tuz"),
            ("Bir tutam karabiber", "Bir tutam", "karabiber"),
            ("2 adet orta boy soğan", "2 adet orta boy", "soğan"),
            ("1 su bardağı yemeklik yağ", "1 su bardağı", "yemeklik yağ"),
            ("3 yemek kaşıkları zeytinyağı", "3 yemek kaşıkları", "zeytinyağı"),
            ("Rendelenmiş kaşar peyniri", "Rendelenmiş", "kaşar peyniri"),
            ("½ limon suyu", "½", "limon suyu"),
            ("200gr kıyma", "200gr", "kıyma"),
            ("1 kutu 2 dilim ekmek", "1 kutu 2 dilim", "ekmek"),
        ],
    )
    def test_split(self, ingredient_parser, text, amount, name):
        assert ingredient_parser.split_by_tokens(text) == (amount, name)

    def test_markers_stripped_before_split(self, ingredient_parser):
        assert ingredient_parser.parse_line(Line(text="- 1 tutam tuz")) == IngredientDraft(amount="1 tutam", name="tuz")
        assert ingredient_parser.parse_line(Line(text="1) 2 yumurta")) == IngredientDraft(amount="2", name="yumurta")
        assert ingredient_parser.parse_line(Line(text="• Tuz")) == IngredientDraft(amount="", name="Tuz")

    def test_empty_name_is_discarded(self, ingredient_parser):
        assert ingredient_parser.parse_line(Line(text="2 adet")) is None

    def test_custom_vocabulary(self):
        parser = IngredientLineParser(ParserVocabulary(unit_words=frozenset({"cup"})))
        assert parser.split_by_tokens("2 cup flour") == ("2 cup", "flour")
        assert parser.split_by_tokens("2 adet yumurta") == ("2", "adet yumurta")

    def test_strip_markers(self):
        assert strip_markers("  - 1. Un") == "Un"
        assert strip_markers("1.5 kg un") == "1.5 kg un"


class TestIngredientGroups:
    """Sub-group headers inside the ingredients section."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Sosu için", True),
            ("Üzeri:", True),
            ("KREMA", True),
            ("2 yumurta", False),
            ("Tuz", False),
            ("- Hamur için", False),
            ("ÇOK UZUN BÜYÜK HARFLİ BİR MALZEME SATIRI", False),
        ],
    )
    def test_detection(self, text, expected):
        assert is_ingredient_group_header(text) is expected

    def test_group_applies_to_following_ingredients(self, ingredient_parser):
        context = ParserContext(section=Section.INGREDIENTS)

        ingredient_parser.handle(Line(text="2 yumurta"), context)
        ingredient_parser.handle(Line(text="Sos için:"), context)
        ingredient_parser.handle(Line(text="1 su bardağı süt"), context)

        assert context.ingredient_group == "Sos için"
        assert context.ingredients == [
            IngredientDraft(amount="2", name="yumurta", group=None),
            IngredientDraft(amount="1 su bardağı", name="süt", group="Sos için"),
        ]


class TestStepHelpers:
    """Numbered-start detection and note extraction."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1. Unu eleyin.", True),
            ("12) Servis edin.", True),
            ("1.5 saat bekletin.", False),
            ("Unu eleyin.", False),
            ("1.Unu eleyin.", False),
        ],
    )
    def test_is_numbered_step(self, text, expected):
        assert is_numbered_step(text) is expected

    def test_extract_notes(self):
        assert extract_notes("Fırını 180 derecede ısıtın (önceden).") == (
            "Fırını 180 derecede ısıtın.",
            ["önceden"],
        )
        assert extract_notes("Karıştırın ( ) ve bekleyin") == ("Karıştırın ve bekleyin", [])
        assert extract_notes("Karıştırın") == ("Karıştırın", [])

    def test_extract_nested_notes(self):
        assert extract_notes("Karıştırın ((yavaşça)) ve") == ("Karıştırın ve", ["yavaşça"])
        assert extract_notes("Pişirin (kapağı (hafifçe) aralık).") == (
            "Pişirin.",
            ["hafifçe", "kapağı aralık"],
        )

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Hamuru için", True),
            ("Servis:", True),
            ("1. Sos için karıştırın", False),
            ("Unu eleyin.", False),
            ("Sosu hazırlamak için tüm malzemeleri bir tencereye alın", False),
        ],
    )
    def test_is_step_group_header(self, text, expected):
        assert is_step_group_header(text) is expected


class TestStepLineParser:
    """Merging, grouping and committing of steps."""

    def _run(self, *texts):
        parser = StepLineParser()
        context = ParserContext(section=Section.STEPS)
        for text in texts:
            parser.handle(Line(text=text), context)
        context.flush_step()
        return context.steps

    def test_continuation_lines_merge(self):
        assert self._run("1. Unu kaseye", "alın ve karıştırın.") == [
            StepDraft(description="Unu kaseye alın ve karıştırın.")
        ]

    def test_numbered_lines_start_new_steps(self):
        steps = self._run("1. Unu eleyin.", "2) Şekeri ekleyin.")
        assert [step.description for step in steps] == ["Unu eleyin.", "Şekeri ekleyin."]

    def test_first_line_without_number_opens_step(self):
        steps = self._run("Soğanları doğrayın", "ve kavurun.", "2. Salçayı ekleyin.")
        assert [step.description for step in steps] == ["Soğanları doğrayın ve kavurun.", "Salçayı ekleyin."]

    def test_notes_are_appended_once(self):
        steps = self._run("1. Karıştırın (yavaşça)", "ve dinlendirin (10 dk).")
        assert steps == [StepDraft(description="Karıştırın ve dinlendirin. (Not: yavaşça; 10 dk)")]

    def test_groups_become_titles(self):
        steps = self._run(
            "Hamuru için:",
            "1. Unu eleyin.",
            "2. Yoğurun.",
            "Sosu için:",
            "1. Domatesleri rendeleyin.",
        )

        assert steps == [
            StepDraft(description="Unu eleyin.", title="Hamuru için"),
            StepDraft(description="Yoğurun.", title="Hamuru için"),
            StepDraft(description="Domatesleri rendeleyin.", title="Sosu için"),
        ]

    def test_title_is_taken_when_step_starts(self):
        parser = StepLineParser()
        context = ParserContext(section=Section.STEPS, step_group="Hamur")
        parser.handle(Line(text="1. Unu eleyin."), context)
        context.step_group = "Sos"
        parser.handle(Line(text="devamı"), context)
        context.flush_step()

        assert context.steps == [StepDraft(description="Unu eleyin. devamı", title="Hamur")]
