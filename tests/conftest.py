"""Test fixtures and configuration."""

import json
from unittest.mock import AsyncMock

import pytest

from repair_advisor.controller import DiagnosticsController
from repair_advisor.history.storage import InMemoryHistoryStorage
from repair_advisor.history.store import HistoryStore
from repair_advisor.llm.analysis import AnalysisRequester
from repair_advisor.llm.device_lookup import DeviceIdentifier
from repair_advisor.schemas.analysis import AnalysisRecord


VALID_ANALYSIS_JSON = json.dumps(
    {
        "problem_analyza": "Pravděpodobně poškozený konektor nabíjení.",
        "odhadovana_cena_kc": 1200,
        "klady_opravy": ["Levná oprava."],
        "zapory_opravy": ["Zařízení je starší."],
        "info_o_zarizeni": "Vydáno v roce 2021.",
    },
    ensure_ascii=False,
)


@pytest.fixture
def analysis_generator():
    """Mock LLM text generator for analysis requests."""
    return AsyncMock(return_value=VALID_ANALYSIS_JSON)


@pytest.fixture
def lookup_generator():
    """Mock LLM text generator for model-number lookups."""
    return AsyncMock(return_value="Samsung Galaxy S21 Ultra")


@pytest.fixture
def storage():
    return InMemoryHistoryStorage()


@pytest.fixture
def clock():
    """Deterministic millisecond clock: 1000, 1001, 1002, ..."""
    ticks = iter(range(1_000, 1_000_000))
    return lambda: next(ticks)


@pytest.fixture
def history_store(storage, clock):
    return HistoryStore(storage, max_items=20, clock=clock)


@pytest.fixture
def requester(analysis_generator):
    return AnalysisRequester(generate=analysis_generator)


@pytest.fixture
def identifier(lookup_generator):
    return DeviceIdentifier(generate=lookup_generator)


@pytest.fixture
def controller(requester, identifier, history_store):
    return DiagnosticsController(requester, identifier, history_store)


@pytest.fixture
def sample_record():
    return AnalysisRecord(
        problem_analysis="Rozbitý displej.",
        estimated_cost=3000,
        pros=["Zachování zařízení."],
        cons=["Vysoká cena dílu."],
    )
