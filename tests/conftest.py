"""Shared fixtures for the MT940 converter tests.

The API keeps the last parsed statement on ``app.state.result_store``. Each
API test gets a fresh store so an upload in one test never leaks into the
download assertions of another.
"""

from __future__ import annotations

import textwrap

import pytest
from fastapi.testclient import TestClient

from mt940_converter.core.storage import LatestResultStore
from mt940_converter.main import app


def dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


SAMPLE_STATEMENT = dedent(
    """
    :20:STARTUMSE
    :25:GB29NWBK60161331926819
    :28C:00001/001
    :60F:C240529EUR1000,00
    :61:2405301234C0RN82,73
    :86:PAYMENT FOR/INVOICE 123
    :61:240531D15,50NTRFNONREF
    :86:/TRTP/SEPA OVERBOEKING/IBAN/NL91ABNA0417164300/
    /NAME/"ACME" BV/REMI/ORDER 77
    :62F:C240531EUR1067,23
    -}
    """
)


@pytest.fixture
def sample_statement() -> str:
    return SAMPLE_STATEMENT


@pytest.fixture
def client() -> TestClient:
    app.state.result_store = LatestResultStore()
    with TestClient(app) as c:
        yield c
