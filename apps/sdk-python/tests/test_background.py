from __future__ import annotations

import threading

from analytics_sdk.background import BackgroundTasks


def test_token_end_is_idempotent() -> None:
    tasks = BackgroundTasks()
    token = tasks.begin()
    assert tasks.active == 1
    token.end()
    token.end()
    assert token.ended
    assert tasks.active == 0


def test_token_released_when_block_raises() -> None:
    tasks = BackgroundTasks()
    try:
        with tasks.begin():
            assert tasks.active == 1
            raise ValueError("boom")
    except ValueError:
        pass
    assert tasks.active == 0


def test_wait_idle_blocks_until_released() -> None:
    tasks = BackgroundTasks()
    token = tasks.begin()
    assert tasks.wait_idle(timeout=0.01) is False

    timer = threading.Timer(0.05, token.end)
    timer.start()
    assert tasks.wait_idle(timeout=5) is True
    timer.join()
