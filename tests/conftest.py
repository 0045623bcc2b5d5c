"""
Shared test fixtures and utilities for the cmdtree test suite.
"""

import asyncio
import inspect
import logging
import time
from concurrent.futures import Future

import pytest

from cmdtree import config
from cmdtree.dispatcher import CommandDispatcher
from cmdtree.execution.scope import CommandScope


class InlineScope:
    """Scheduler that runs each unit of work immediately on the calling thread."""

    def __init__(self):
        self.launched = []

    def launch(self, work):
        self.launched.append(work)
        future = Future()
        try:
            result = work()
            if inspect.iscoroutine(result):
                result = asyncio.run(result)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def inline_scope():
    """Scheduler that runs launched work synchronously and records it."""
    return InlineScope()


@pytest.fixture
def scope():
    """A real background scope, closed after the test."""
    with CommandScope() as command_scope:
        yield command_scope


@pytest.fixture
def dispatcher(inline_scope):
    """Dispatcher whose builders launch async work inline."""
    return CommandDispatcher(scope=inline_scope)


@pytest.fixture
def reset_defaults():
    """Restore the process-wide scope and dispatcher after the test."""
    yield
    default_scope = config._default_scope
    config.set_default_scope(None)
    config.set_default_dispatcher(None)
    if isinstance(default_scope, CommandScope):
        default_scope.close()


@pytest.fixture
def wait_for_log(caplog):
    """Poll captured records until one matches, for logs written by other threads."""

    def wait(message: str, level: int = logging.ERROR, timeout: float = 5.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            for record in caplog.records:
                if record.levelno == level and message in record.getMessage():
                    return record
            time.sleep(0.01)
        return None

    return wait
