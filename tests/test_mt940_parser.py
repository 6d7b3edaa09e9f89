from decimal import Decimal

from conftest import dedent

from mt940_converter.schemas.statement import WarningCode
from mt940_converter.schemas.transactions import UNKNOWN_ACCOUNT, CreditDebit
from mt940_converter.utils.mt940_parser import build_description, parse_mt940, split_lines


def test_split_lines_normalizes_line_endings():
    assert split_lines("\ufeff:20:A\r\n:25:B\r:61:C\n") == [":20:A", ":25:B", ":61:C", ""]


def test_build_description():
    assert build_description(["PAYMENT FOR/INVOICE 123"]) == "PAYMENT FOR INVOICE 123"
    assert build_description(["/A//B/ ", "  C\tD "]) == "A B C D"
    assert build_description(['SAID "HI"']) == 'SAID ""HI""'
    assert build_description([""]) == ""


def test_spec_example_statement():
    content = ":25:GB29NWBK60161331926819\n:61:2405301234C0RN82,73\n:86:PAYMENT FOR/INVOICE 123\n"
    result = parse_mt940(content)

    assert len(result.transactions) == 1
    tx = result.transactions[0]
    assert tx.account_number == "GB29NWBK60161331926819"
    assert tx.value_date.as_date().isoformat() == "2024-05-30"
    assert tx.credit_debit == CreditDebit.CREDIT
    assert tx.amount == Decimal("82.73")
    assert tx.description == "PAYMENT FOR INVOICE 123"
    assert result.warnings == []


def test_sample_statement(sample_statement):
    result = parse_mt940(sample_statement)

    assert [tx.value_date.short for tx in result.transactions] == ["240530", "240531"]
    second = result.transactions[1]
    assert second.credit_debit == CreditDebit.DEBIT
    assert second.amount == Decimal("15.50")
    # continuation line joined, trailing :62F: balance and -} terminator ignored
    assert second.description == 'TRTP SEPA OVERBOEKING IBAN NL91ABNA0417164300 NAME ""ACME"" BV REMI ORDER 77'
    assert result.account_numbers == ["GB29NWBK60161331926819"]


def test_crlf_input_parses_the_same(sample_statement):
    lf = parse_mt940(sample_statement)
    crlf = parse_mt940(sample_statement.replace("\n", "\r\n"))
    assert crlf.transactions == lf.transactions


def test_unparsable_amount_keeps_rest_of_batch_in_order():
    content = dedent(
        """
        :25:NL91ABNA0417164300
        :61:240101C10,00NTRF
        :86:FIRST
        :61:240102DXYZNTRF
        :86:SECOND
        :61:240103C30,00NTRF
        :86:THIRD
        """
    )
    result = parse_mt940(content)

    assert [tx.amount for tx in result.transactions] == [Decimal("10.00"), Decimal("0.00"), Decimal("30.00")]
    assert [tx.description for tx in result.transactions] == ["FIRST", "SECOND", "THIRD"]
    assert len(result.warnings) == 1
    assert result.warnings[0].code == WarningCode.INVALID_AMOUNT
    assert result.warnings[0].line_number == 4


def test_no_account_tag_uses_shared_sentinel():
    result = parse_mt940(":61:240101C10,00\n:61:240102D5,00\n")

    assert [tx.account_number for tx in result.transactions] == [UNKNOWN_ACCOUNT, UNKNOWN_ACCOUNT]
    assert [w.code for w in result.warnings] == [WarningCode.UNKNOWN_ACCOUNT]


def test_empty_account_tag_uses_sentinel():
    result = parse_mt940(":25:\n:61:240101C10,00\n")
    assert result.transactions[0].account_number == UNKNOWN_ACCOUNT


def test_account_applies_until_next_account_tag():
    content = dedent(
        """
        :25:GB29NWBK60161331926819
        :61:240101C10,00
        :61:240102C11,00
        :25:EURNL91ABNA0417164300
        :61:240103C12,00
        """
    )
    result = parse_mt940(content)

    assert [tx.account_number for tx in result.transactions] == [
        "GB29NWBK60161331926819",
        "GB29NWBK60161331926819",
        "NL91ABNA0417164300",
    ]
    assert result.account_numbers == ["GB29NWBK60161331926819", "NL91ABNA0417164300"]


def test_description_continuation_rules():
    content = dedent(
        """
        :86:NOT ATTACHED
        orphan text
        :25:NL91ABNA0417164300
        :61:240101C10,00
        text before any 86 is ignored
        :86:LINE ONE
        line two
        :86:LINE THREE
        :61:240102D1,00
        """
    )
    result = parse_mt940(content)

    assert [tx.description for tx in result.transactions] == ["LINE ONE line two LINE THREE", ""]


def test_last_transaction_is_flushed_without_description():
    result = parse_mt940(":25:NL91ABNA0417164300\n:61:240101C10,00")
    assert len(result.transactions) == 1
    assert result.transactions[0].description == ""


def test_empty_input_is_an_empty_result():
    for content in ("", "\n\n", ":20:REF\n:62F:C240101EUR0,00\n"):
        result = parse_mt940(content)
        assert result.transactions == []
        assert result.warnings == []


def test_default_flag_policy_is_passed_through():
    result = parse_mt940(":25:NL91ABNA0417164300\n:61:24010110,00\n", default_flag=CreditDebit.DEBIT)
    assert result.transactions[0].credit_debit == CreditDebit.DEBIT
    assert result.transactions[0].signed_amount == Decimal("-10.00")


def test_description_is_kept_when_a_tag_line_follows():
    content = dedent(
        """
        :25:NL91ABNA0417164300
        :61:240101C10,00NTRF
        :86:FIRST
        more first
        :62M:C240101EUR10,00
        not a continuation
        :61:240102C20,00NTRF
        :86:SECOND
        :25:GB29NWBK60161331926819
        :61:240103C30,00NTRF
        :86:LAST
        :62F:C240103EUR60,00
        -}
        """
    )
    result = parse_mt940(content)

    assert [tx.description for tx in result.transactions] == ["FIRST more first", "SECOND", "LAST"]
    assert [tx.account_number for tx in result.transactions] == [
        "NL91ABNA0417164300",
        "NL91ABNA0417164300",
        "GB29NWBK60161331926819",
    ]


def test_oversized_amount_keeps_rest_of_batch():
    content = dedent(
        """
        :25:NL91ABNA0417164300
        :61:240101C10,00NTRF
        :61:240102C{digits},00NTRF
        :61:240103D30,00NTRF
        """
    ).format(digits="9" * 30)
    result = parse_mt940(content)

    assert [tx.amount for tx in result.transactions] == [Decimal("10.00"), Decimal("0.00"), Decimal("30.00")]
    assert [w.code for w in result.warnings] == [WarningCode.INVALID_AMOUNT]
    assert result.warnings[0].line_number == 3
