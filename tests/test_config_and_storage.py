import pytest
from pydantic import ValidationError

from mt940_converter.core.config import Settings
from mt940_converter.core.storage import LatestResultStore
from mt940_converter.schemas.statement import ParseResult
from mt940_converter.services.statement_service import convert_statement


def test_settings_defaults():
    s = Settings()
    assert s.DEFAULT_CREDIT_DEBIT_FLAG == "C"
    assert s.CENTURY_PIVOT == 30
    assert s.AMOUNT_PREFIX == ""
    assert ".sta" in s.allowed_extensions_list


def test_settings_list_parsing():
    s = Settings(ALLOWED_EXTENSIONS=" .STA, .fin ,", CORS_ORIGINS="https://a.example, https://b.example")
    assert s.allowed_extensions_list == [".sta", ".fin"]
    assert s.cors_origins_list == ["https://a.example", "https://b.example"]


def test_settings_reject_unknown_flag_policy():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_CREDIT_DEBIT_FLAG="X")


def test_policies_flow_from_settings_into_parser():
    s = Settings(DEFAULT_CREDIT_DEBIT_FLAG="D", CENTURY_PIVOT=50)
    result = convert_statement(":25:NL91ABNA0417164300\n:61:4501019,99\n", s)

    tx = result.transactions[0]
    assert tx.credit_debit.value == "D"
    assert tx.value_date.iso == "2045-01-01"


def test_result_store_slot():
    store = LatestResultStore()
    assert store.get() is None

    empty = ParseResult()
    store.set(empty)
    assert store.get() is empty

    store.clear()
    assert store.get() is None
