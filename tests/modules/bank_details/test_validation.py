"""
Unit tests for IBAN / BIC / account holder validation.
"""

import pytest

from app.modules.bank_details.validation import (
    format_iban,
    is_valid_account_holder,
    is_valid_bic,
    is_valid_iban,
)


class TestIban:
    @pytest.mark.parametrize(
        "iban",
        [
            "FR7630006000011234567890189",
            "FR76 3000 6000 0112 3456 7890 189",
            "fr7630006000011234567890189",
            "DE89370400440532013000",
            "GB82WEST12345698765432",
        ],
    )
    def test_valid(self, iban):
        assert is_valid_iban(iban)

    @pytest.mark.parametrize(
        "iban",
        [
            None,
            "",
            "FR7630006000011234567890188",  # bad checksum
            "FR76300060000112345678901",  # French IBAN of the wrong length
            "DE8937040044",  # too short
            "12FR30006000011234567890189",  # country code not letters
            "FR76-3000-6000-0112-3456-7890-189",
        ],
    )
    def test_invalid(self, iban):
        assert not is_valid_iban(iban)

    def test_format(self):
        assert format_iban("fr7630006000011234567890189") == "FR76 3000 6000 0112 3456 7890 189"
        assert format_iban("") == ""


class TestBic:
    @pytest.mark.parametrize("bic", ["BNPAFRPP", "BNPAFRPPXXX", "deutdeff500", "AGRI FRPP 882"])
    def test_valid(self, bic):
        assert is_valid_bic(bic)

    @pytest.mark.parametrize("bic", [None, "", "BNPAFR", "BNPAFRPPXX", "1NPAFRPP", "BNPA1RPP"])
    def test_invalid(self, bic):
        assert not is_valid_bic(bic)


class TestAccountHolder:
    @pytest.mark.parametrize("name", ["Jean Dupont", "Marie-Hélène O'Neil", "Zoé"])
    def test_valid(self, name):
        assert is_valid_account_holder(name)

    @pytest.mark.parametrize("name", [None, "", " ", "J", "Robert; DROP TABLE", "Jean2"])
    def test_invalid(self, name):
        assert not is_valid_account_holder(name)
