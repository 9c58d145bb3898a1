import json
import logging

import pytest

from giro_scanner.invoice import EventKind, Field, GiroType, Invoice
from giro_scanner.utils.exceptions import FieldValidationError

REFERENCE_ONLY = "H  #79927398713  #  "
AMOUNT_ONLY = "  100  00 8 >"
ACCOUNT_ONLY = ">  90001193#41#"


@pytest.fixture
def invoice():
    return Invoice()


class TestParse:

    def test_full_line_first_call(self, invoice, full_line):
        decoded = invoice.parse(full_line)

        assert decoded == 15
        assert decoded == Field.REFERENCE | Field.AMOUNT | Field.GIRO_ACCOUNT | Field.DOCUMENT_TYPE
        assert invoice.get_formatted_amount() == "100,00"
        assert invoice.get_type() == "BG"
        assert invoice.get_formatted_account() == "9000-1193"
        assert invoice.is_complete()

    def test_same_line_twice_reports_nothing(self, invoice, full_line):
        invoice.parse(full_line)
        assert invoice.parse(full_line) == 0
        assert invoice.last_fields_decoded == 0
        assert all(e.kind is EventKind.UNCHANGED for e in invoice.last_events)

    def test_broken_reference_checksum_keeps_stored_value(self, invoice, full_line):
        invoice.parse(full_line)
        broken = full_line.replace("79927398713", "79927398714")

        assert invoice.parse(broken) == 0
        assert invoice.reference == "79927398713"
        failures = invoice.checksum_failures
        assert len(failures) == 1
        assert failures[0].field is Field.REFERENCE
        assert failures[0].candidate == "79927398714"

    def test_last_fields_decoded_tracks_latest_call(self, invoice):
        invoice.parse(REFERENCE_ONLY)
        assert invoice.last_fields_decoded == Field.REFERENCE
        invoice.parse("nothing here")
        assert invoice.last_fields_decoded == 0

    @pytest.mark.parametrize("fragment, expected", [
        (REFERENCE_ONLY, Field.REFERENCE),
        (AMOUNT_ONLY, Field.AMOUNT),
        (ACCOUNT_ONLY, Field.GIRO_ACCOUNT | Field.DOCUMENT_TYPE),
    ])
    def test_fields_are_independent(self, invoice, fragment, expected):
        assert invoice.parse(fragment) == expected
        assert invoice.is_reference_defined() == (expected == Field.REFERENCE)
        assert invoice.is_amount_defined() == (expected == Field.AMOUNT)
        assert invoice.is_giro_account_defined() == bool(expected & Field.GIRO_ACCOUNT)

    def test_fields_accumulate_across_fragments(self, invoice):
        assert invoice.parse(REFERENCE_ONLY) == 1
        assert not invoice.is_complete()
        assert invoice.parse(AMOUNT_ONLY) == 2
        assert not invoice.is_complete()
        assert invoice.parse(ACCOUNT_ONLY) == 12
        assert invoice.is_complete()

    def test_amount_checksum_failure_is_reported_not_raised(self, invoice, caplog):
        with caplog.at_level(logging.WARNING, logger="giro_scanner"):
            assert invoice.parse("  100  00 7 >") == 0

        assert not invoice.is_amount_defined()
        assert invoice.last_events[0].kind is EventKind.CHECKSUM_FAILED
        assert invoice.last_events[0].field is Field.AMOUNT
        assert "Check digit invalid" in caplog.text

    def test_new_valid_amount_replaces_old(self, invoice):
        invoice.parse(AMOUNT_ONLY)
        assert invoice.parse("  250  50 6 >") == Field.AMOUNT
        assert invoice.get_formatted_amount() == "250,50"
        assert invoice.check_digit_amount == "6"

    def test_leading_zero_amount_is_the_same_amount(self, invoice):
        invoice.parse(AMOUNT_ONLY)
        assert invoice.parse("  0100  00 8 >") == 0

    def test_account_change_sets_both_bits(self, invoice):
        invoice.parse("90001193#41#")
        assert invoice.parse("90001193#42#") == Field.GIRO_ACCOUNT | Field.DOCUMENT_TYPE
        assert invoice.internal_document_type == 42

    def test_account_has_no_checksum(self, invoice):
        assert invoice.parse("12345678#99#") == 12
        assert invoice.giro_account == "12345678"

    def test_completeness_survives_bad_input(self, invoice, full_line):
        invoice.parse(full_line)
        for fragment in ["", "garbage", "H  #12  #  ", "  100  00 7 >", "#  1 00 0 >"]:
            invoice.parse(fragment)
            assert invoice.is_complete()

    def test_listener_receives_events(self, full_line):
        seen = []
        invoice = Invoice(listener=seen.append)
        invoice.parse(full_line)
        invoice.parse(full_line.replace("100  00 8", "100  00 9"))

        kinds = [e.kind for e in seen]
        assert kinds.count(EventKind.ACCEPTED) == 3
        assert EventKind.CHECKSUM_FAILED in kinds


class TestAccessors:

    def test_fresh_invoice_is_undefined(self, invoice):
        assert invoice.reference is None
        assert invoice.amount is None
        assert invoice.amount_fractional is None
        assert invoice.check_digit_amount is None
        assert invoice.giro_account is None
        assert invoice.internal_document_type is None
        assert invoice.get_type() is None
        assert invoice.get_formatted_account() is None
        assert invoice.get_formatted_amount() == ""
        assert not invoice.is_document_type_defined()
        assert not invoice.is_complete()
        assert invoice.missing_fields() == ["reference", "amount", "giro_account"]

    def test_raw_values(self, invoice, full_line):
        invoice.parse(full_line)
        assert invoice.check_digit_reference == "3"
        assert invoice.amount == 100
        assert invoice.amount_fractional == 0
        assert invoice.check_digit_amount == "8"
        assert invoice.giro_account == "90001193"
        assert invoice.internal_document_type == 41

    def test_fields_returns_a_copy(self, invoice, full_line):
        invoice.parse(full_line)
        snapshot = invoice.fields
        snapshot.reference = None
        assert invoice.reference == "79927398713"

    def test_plusgiro_account(self, invoice):
        invoice.parse("1234567 #14#")
        assert invoice.get_type() is GiroType.PLUSGIRO
        assert invoice.get_formatted_account() == "123456-7"

    def test_to_dict_and_json(self, invoice, full_line):
        invoice.parse(full_line)
        data = json.loads(invoice.to_json())
        assert data == invoice.to_dict()
        assert data["type"] == "BG"
        assert data["formatted_account"] == "9000-1193"
        assert data["complete"] is True
        assert data["last_fields_decoded"] == [
            "reference", "amount", "giro_account", "document_type"
        ]

    def test_str_of_empty_invoice(self, invoice):
        assert str(invoice) == (
            "#\tNO REF #\t NO AMOUNT XX   X >\t\tNO GIRO#XX#\tInvoice incomplete"
        )

    def test_str_of_complete_invoice(self, invoice, full_line):
        invoice.parse(full_line)
        assert str(invoice) == (
            "#\t79927398713 #\t 100 00   8 >\t\t90001193#41#\tInvoice complete"
        )


class TestExplicitAssignment:

    def test_set_valid_fields(self, invoice):
        invoice.set_reference("79927398713")
        invoice.set_amount(100, 0, "8")
        invoice.set_giro_account("1234567", 14)
        assert invoice.is_complete()
        assert invoice.get_formatted_account() == "123456-7"

    def test_check_digit_may_be_int(self, invoice):
        invoice.set_amount(250, 50, 6)
        assert invoice.check_digit_amount == "6"

    @pytest.mark.parametrize("reference", ["79927398714", "1", "12a", "1" * 26 + "0", ""])
    def test_invalid_reference(self, invoice, reference):
        with pytest.raises(FieldValidationError) as exc_info:
            invoice.set_reference(reference)
        assert exc_info.value.field == "reference"
        assert invoice.reference is None

    @pytest.mark.parametrize("whole, fractional, check_digit", [
        (100, 0, 7),
        (100_000_000, 0, 0),
        (-1, 0, 0),
        (100, 100, 0),
        (100, 0, "10"),
    ])
    def test_invalid_amount(self, invoice, whole, fractional, check_digit):
        invoice.set_amount(100, 0, 8)
        with pytest.raises(FieldValidationError):
            invoice.set_amount(whole, fractional, check_digit)
        assert invoice.get_formatted_amount() == "100,00"

    @pytest.mark.parametrize("number, document_type", [
        ("123456", 41),
        ("123456789", 41),
        ("12345a7", 41),
        ("1234567", 100),
        ("1234567", -1),
    ])
    def test_invalid_account(self, invoice, number, document_type):
        with pytest.raises(FieldValidationError):
            invoice.set_giro_account(number, document_type)
        assert not invoice.is_giro_account_defined()

    def test_parse_after_set_with_same_value_is_unchanged(self, invoice):
        invoice.set_reference("79927398713")
        assert invoice.parse(REFERENCE_ONLY) == 0


class TestReset:

    def test_reset_single_fields(self, invoice, full_line):
        invoice.parse(full_line)

        invoice.reset_amount()
        assert not invoice.is_amount_defined()
        assert invoice.check_digit_amount is None
        assert not invoice.is_complete()

        invoice.reset_giro_account()
        assert not invoice.is_giro_account_defined()
        assert not invoice.is_document_type_defined()
        assert invoice.get_type() is None

        invoice.reset_reference()
        assert not invoice.is_reference_defined()

    def test_reset_field_is_reported_again(self, invoice, full_line):
        invoice.parse(full_line)
        invoice.reset_reference()
        assert invoice.parse(full_line) == Field.REFERENCE

    def test_reset_all(self, invoice, full_line):
        invoice.parse(full_line)
        invoice.reset()
        assert invoice.missing_fields() == ["reference", "amount", "giro_account"]
        assert invoice.last_fields_decoded == 0
        assert invoice.last_events == []
