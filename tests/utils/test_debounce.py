# tests/utils/test_debounce.py
import asyncio

import pytest

from portal.utils.debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_delivers_only_last_value():
    delivered = []
    debouncer = Debouncer(delivered.append, delay_ms=30, initial="")

    for term in ["b", "ba", "bar", "bara"]:
        debouncer.push(term)
        await asyncio.sleep(0.005)

    assert delivered == []
    assert debouncer.pending
    await asyncio.sleep(0.08)

    assert delivered == ["bara"]
    assert debouncer.value == "bara"
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_flush_and_cancel():
    delivered = []
    debouncer = Debouncer(delivered.append, delay_ms=1000)

    debouncer.push("now")
    debouncer.flush()
    assert delivered == ["now"]

    debouncer.push("never")
    debouncer.cancel()
    await asyncio.sleep(0.01)
    assert delivered == ["now"]
    assert debouncer.value == "now"


@pytest.mark.asyncio
async def test_flush_without_pending_value_is_noop():
    delivered = []
    Debouncer(delivered.append).flush()
    assert delivered == []
