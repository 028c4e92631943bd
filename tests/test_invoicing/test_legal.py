"""Tests des mentions légales."""

from factures_b2c.invoicing.legal import LEGAL_MENTIONS, generate_legal_mentions
from factures_b2c.models.enums import Language


class TestGenerateLegalMentions:
    """Tests de composition des mentions."""

    def test_domestic_french(self) -> None:
        text = generate_legal_mentions(False, False, "FR")
        fr = LEGAL_MENTIONS[Language.FR]
        assert text == "\n\n".join([fr["storage"], fr["warranty"], fr["late_payment"]])

    def test_franchise_addendum(self) -> None:
        text = generate_legal_mentions(False, True, "FR")
        assert text.endswith("TVA non applicable, art. 293 B du CGI")
        assert "OSS" not in text

    def test_oss_addendum(self) -> None:
        text = generate_legal_mentions(True, False, "FR")
        assert text.endswith("TVA acquittée dans le cadre du régime de l'OSS (One Stop Shop)")

    def test_franchise_wins_over_oss(self) -> None:
        text = generate_legal_mentions(True, True, "FR")
        assert "293 B" in text
        assert "One Stop Shop" not in text

    def test_english(self) -> None:
        text = generate_legal_mentions(True, False, "EN")
        assert text.startswith("Invoice to be kept for 10 years")
        assert text.endswith("VAT paid under the OSS (One Stop Shop) regime")

    def test_language_is_case_insensitive(self) -> None:
        assert generate_legal_mentions(False, False, "fr") == generate_legal_mentions(
            False, False, Language.FR
        )

    def test_other_languages_fall_back_to_english(self) -> None:
        assert generate_legal_mentions(False, True, "DE") == generate_legal_mentions(
            False, True, "EN"
        )

    def test_mentions_are_separated_by_blank_lines(self) -> None:
        assert len(generate_legal_mentions(True, False, "FR").split("\n\n")) == 4
