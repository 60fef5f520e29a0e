"""Tests for the diagnostics controller — orchestration and in-flight rules."""

import asyncio

import pytest

from repair_advisor.controller import (
    ANALYSIS_BUSY_MESSAGE,
    BUSY_KIND,
    LOOKUP_BUSY_MESSAGE,
    format_analysis_text,
    format_price,
)
from repair_advisor.llm.analysis import EMPTY_DESCRIPTION_MESSAGE
from repair_advisor.schemas.analysis import AnalysisRecord

SLOW_ANALYSIS_JSON = '{"problem_analyza": "Vadný konektor", "odhadovana_cena_kc": 800}'


async def _spin():
    for _ in range(5):
        await asyncio.sleep(0)


class TestSubmitAnalysis:
    @pytest.mark.asyncio
    async def test_success_is_stored_in_history(self, controller):
        outcome = await controller.submit_analysis("Nenabíjí se", "phone", "iPhone 12")

        assert outcome.error is None
        assert outcome.entry is not None
        assert outcome.entry.problem_description == "Nenabíjí se"
        assert outcome.entry.device_model == "iPhone 12"
        assert controller.history.entries == [outcome.entry]
        assert controller.get_entry(outcome.entry.id) == outcome.entry

    @pytest.mark.asyncio
    async def test_invalid_input_becomes_message(self, controller, analysis_generator):
        outcome = await controller.submit_analysis("  ", "phone", "")

        assert outcome.entry is None
        assert outcome.error == EMPTY_DESCRIPTION_MESSAGE
        assert outcome.error_kind == "invalid_input"
        assert len(controller.history) == 0
        analysis_generator.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_message(self, controller, analysis_generator):
        analysis_generator.side_effect = RuntimeError("quota exceeded")

        outcome = await controller.submit_analysis("Nejde zapnout", "phone", "")

        assert outcome.entry is None
        assert outcome.error_kind == "quota_exceeded"
        assert "limit" in outcome.error
        assert len(controller.history) == 0

    @pytest.mark.asyncio
    async def test_second_submission_refused_while_running(self, controller, analysis_generator):
        release = asyncio.Event()

        async def slow_generate(*args, **kwargs):
            await release.wait()
            return SLOW_ANALYSIS_JSON

        analysis_generator.side_effect = slow_generate

        first = asyncio.create_task(controller.submit_analysis("Nejde zapnout", "phone", ""))
        await _spin()
        assert controller.analysis_in_progress

        second = await controller.submit_analysis("Jiný problém", "phone", "")
        assert second.error == ANALYSIS_BUSY_MESSAGE
        assert second.error_kind == BUSY_KIND

        release.set()
        result = await first
        assert result.entry is not None
        assert not controller.analysis_in_progress
        assert analysis_generator.await_count == 1

    @pytest.mark.asyncio
    async def test_lookup_independent_of_running_analysis(self, controller, analysis_generator):
        release = asyncio.Event()

        async def slow_generate(*args, **kwargs):
            await release.wait()
            return SLOW_ANALYSIS_JSON

        analysis_generator.side_effect = slow_generate

        analysis = asyncio.create_task(controller.submit_analysis("Nejde zapnout", "phone", ""))
        await _spin()

        lookup = await controller.lookup_model("SM-G998B")
        assert lookup.device_name == "Samsung Galaxy S21 Ultra"

        release.set()
        await analysis


class TestLookupModel:
    @pytest.mark.asyncio
    async def test_success(self, controller):
        outcome = await controller.lookup_model("SM-G998B")
        assert outcome.device_name == "Samsung Galaxy S21 Ultra"
        assert outcome.error is None

    @pytest.mark.asyncio
    async def test_not_recognized(self, controller, lookup_generator):
        lookup_generator.return_value = ""
        outcome = await controller.lookup_model("XYZ")
        assert outcome.device_name is None
        assert outcome.error_kind == "not_recognized"
        assert outcome.error

    @pytest.mark.asyncio
    async def test_second_lookup_refused_while_running(self, controller, lookup_generator):
        release = asyncio.Event()

        async def slow_generate(*args, **kwargs):
            await release.wait()
            return "Apple iPhone 13 Pro"

        lookup_generator.side_effect = slow_generate

        first = asyncio.create_task(controller.lookup_model("A2638"))
        await _spin()

        second = await controller.lookup_model("A2638")
        assert second.error == LOOKUP_BUSY_MESSAGE

        release.set()
        assert (await first).device_name == "Apple iPhone 13 Pro"


class TestClearHistory:
    @pytest.mark.asyncio
    async def test_clear(self, controller, storage):
        await controller.submit_analysis("Nenabíjí se", "phone", "")
        await controller.clear_history()
        assert controller.history.entries == []
        assert storage.blob is None


class TestFormatAnalysisText:
    def test_full_record(self):
        record = AnalysisRecord(
            problem_analysis="Vadná baterie.",
            estimated_cost=12500,
            pros=["Levnější než nový."],
            cons=["Riziko další závady."],
            device_info="Vydáno 2021.",
        )
        text = format_analysis_text(record, "phone", "iPhone 13")

        assert text.startswith("Výsledek Analýzy pro: Telefon: iPhone 13")
        assert "Info o zařízení: Vydáno 2021." in text
        assert "Odhadovaná cena opravy: 12 500 Kč" in text
        assert "Klady opravy:\n- Levnější než nový." in text
        assert "Zápory/Rizika opravy:\n- Riziko další závady." in text

    def test_minimal_record_omits_empty_sections(self):
        record = AnalysisRecord(problem_analysis="X", estimated_cost=100)
        text = format_analysis_text(record, "tablet")

        assert "Výsledek Analýzy pro: Tablet\n" in text
        assert "Info o zařízení" not in text
        assert "Klady" not in text
        assert "Zápory" not in text


@pytest.mark.parametrize(
    "amount, expected",
    [(0, "0"), (999, "999"), (2500, "2 500"), (1250000, "1 250 000")],
)
def test_format_price(amount, expected):
    assert format_price(amount) == expected
