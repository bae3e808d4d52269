"""Tests for structured field extraction from OCR text."""

import re

from lexform.extraction.field_extractor import (
    DEFAULT_RULES,
    LABEL,
    SHAPE,
    ExtractedField,
    FieldExtractor,
    FieldRule,
    extract_fields,
)


class TestLabelRules:
    """Tests for label-anchored rules."""

    def setup_method(self) -> None:
        self.extractor = FieldExtractor()

    def test_name_and_address(self) -> None:
        fields = self.extractor.extract("Name: John Doe\nAddress: 12 Main St")
        assert fields["name"] == "John Doe"
        assert fields["address"].startswith("12 Main St")

    def test_uppercase_label_without_colon(self) -> None:
        fields = self.extractor.extract("NAME JOHN DOE")
        assert fields["name"] == "JOHN DOE"

    def test_label_inside_word_not_matched(self) -> None:
        fields = self.extractor.extract("Surname: Doe")
        assert "name" not in fields

    def test_address_spans_following_lines(self) -> None:
        text = (
            "Address: 12 MG Road\n  Indiranagar\nBengaluru   560038\nKarnataka\nIndia"
        )
        fields = self.extractor.extract(text)
        assert fields["address"] == "12 MG Road Indiranagar Bengaluru 560038 Karnataka"

    def test_date_numeric(self) -> None:
        assert self.extractor.extract("Date: 05/03/2024")["date"] == "05/03/2024"

    def test_date_month_name(self) -> None:
        fields = self.extractor.extract("DATE 12 January 2024")
        assert fields["date"] == "12 January 2024"

    def test_date_label_without_date_value(self) -> None:
        fields = self.extractor.extract("Date of hearing to be fixed")
        assert "date" not in fields

    def test_date_with_overlong_year_not_truncated(self) -> None:
        fields = self.extractor.extract("Date: 01/02/20245")
        assert "date" not in fields
        assert "date_of_birth" not in fields

    def test_date_followed_by_punctuation(self) -> None:
        assert self.extractor.extract("Date: 01/02/2024.")["date"] == "01/02/2024"

    def test_aadhaar_label(self) -> None:
        fields = self.extractor.extract("Aadhaar No: 1234 5678 9012")
        assert fields["aadhaar"] == "123456789012"

    def test_uid_label(self) -> None:
        assert self.extractor.extract("UID 987654321098")["aadhaar"] == "987654321098"

    def test_pan_label(self) -> None:
        assert self.extractor.extract("PAN: ABCDE1234F")["pan"] == "ABCDE1234F"

    def test_pan_label_rejects_longer_value(self) -> None:
        assert "pan" not in self.extractor.extract("PAN: ABCDE1234FGH")

    def test_case_number(self) -> None:
        fields = self.extractor.extract("Case No. : CS/1234/2023\nNext line")
        assert fields["case_number"] == "CS/1234/2023"

    def test_case_number_long_label(self) -> None:
        fields = self.extractor.extract("CASE NUMBER: WP-55-2022")
        assert fields["case_number"] == "WP-55-2022"

    def test_court(self) -> None:
        fields = self.extractor.extract("Court: District Court, Pune\nParties: A v. B")
        assert fields["court"] == "District Court, Pune"

    def test_amount_rupees(self) -> None:
        assert self.extractor.extract("Rs. 25,000.")["amount"] == "25,000"

    def test_amount_label(self) -> None:
        assert self.extractor.extract("Amount: 1,50,000.50")["amount"] == "1,50,000.50"

    def test_first_match_wins(self) -> None:
        fields = self.extractor.extract("Name: First Person\nName: Second Person")
        assert fields["name"] == "First Person"

    def test_label_with_empty_value_not_populated(self) -> None:
        fields = self.extractor.extract("Name:\n\nCourt:   \n")
        assert "name" not in fields
        assert "court" not in fields


class TestShapeRules:
    """Tests for shape-anchored rules."""

    def setup_method(self) -> None:
        self.extractor = FieldExtractor()

    def test_unlabelled_aadhaar(self) -> None:
        fields = self.extractor.extract("1234 5678 9012")
        assert fields["aadhaar_number"] == "123456789012"

    def test_unlabelled_aadhaar_without_spaces(self) -> None:
        assert self.extractor.extract("x 123456789012 y")["aadhaar_number"] == (
            "123456789012"
        )

    def test_longer_digit_run_is_not_aadhaar(self) -> None:
        assert "aadhaar_number" not in self.extractor.extract("12345678901234")

    def test_unlabelled_pan(self) -> None:
        assert self.extractor.extract("card ABCDE1234F")["pan_number"] == "ABCDE1234F"

    def test_lowercase_pan_shape_ignored(self) -> None:
        assert "pan_number" not in self.extractor.extract("abcde1234f")

    def test_date_of_birth_shape(self) -> None:
        assert self.extractor.extract("DOB 15-08-1985")["date_of_birth"] == "15-08-1985"


class TestFieldExtractor:
    """Tests for extractor-wide behaviour."""

    def setup_method(self) -> None:
        self.extractor = FieldExtractor()

    def test_empty_text(self) -> None:
        assert self.extractor.extract("") == {}

    def test_garbage_text(self) -> None:
        assert self.extractor.extract("\x00\x01 ~~ ### �") == {}

    def test_rules_are_independent(self, aadhaar_text: str) -> None:
        fields = self.extractor.extract(aadhaar_text)
        assert fields["name"] == "Ramesh Kumar"
        assert fields["aadhaar_number"] == "123456789012"
        assert fields["date_of_birth"] == "15/08/1985"
        assert fields["address"].startswith("12 MG Road Bengaluru, Karnataka")
        assert "aadhaar" not in fields

    def test_label_and_shape_both_populate(self) -> None:
        fields = self.extractor.extract("PAN: ABCDE1234F")
        assert fields["pan"] == "ABCDE1234F"
        assert fields["pan_number"] == "ABCDE1234F"

    def test_no_empty_values(self, aadhaar_text: str) -> None:
        assert all(self.extractor.extract(aadhaar_text).values())

    def test_restrict_fields(self) -> None:
        fields = self.extractor.extract("Name: Asha\nPAN: ABCDE1234F", ["name"])
        assert fields == {"name": "Asha"}

    def test_unknown_field_ignored(self) -> None:
        assert self.extractor.extract("Name: Asha", ["nonexistent"]) == {}

    def test_extract_fields_positions(self) -> None:
        text = "Court: High Court"
        results = self.extractor.extract_fields(text, ["court"])
        assert len(results) == 1
        found = results[0]
        assert isinstance(found, ExtractedField)
        assert found.extraction_method == LABEL
        assert text[found.start_pos : found.end_pos] == "High Court"

    def test_shape_method_recorded(self) -> None:
        results = self.extractor.extract_fields("ABCDE1234F", ["pan_number"])
        assert results[0].extraction_method == SHAPE

    def test_results_in_rule_order(self) -> None:
        text = "Amount: 100\nName: Asha"
        names = [f.field_name for f in self.extractor.extract_fields(text)]
        assert names.index("name") < names.index("amount")

    def test_field_names(self) -> None:
        assert self.extractor.field_names == [r.field_name for r in DEFAULT_RULES]
        assert "case_number" in self.extractor.field_names

    def test_custom_rules(self) -> None:
        rule = FieldRule("gstin", re.compile(r"GSTIN[: ]+(\w{15})"), LABEL)
        extractor = FieldExtractor(rules=(rule,))
        assert extractor.extract("GSTIN: 29ABCDE1234F1Z5") == {
            "gstin": "29ABCDE1234F1Z5"
        }

    def test_module_helper(self) -> None:
        assert extract_fields("Name: Asha") == {"name": "Asha"}
