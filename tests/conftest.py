"""
Shared fixtures for the byzershell tests.
"""

import io

import pytest

from byzershell.shell.utils.shared_io import SharedIO


class ScriptedReader:
    """Line reader returning queued lines, then raising EOFError.

    An exception instance in the queue is raised instead of returned.
    """

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError()
        item = self.lines.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def shared_io(output):
    return SharedIO(input=io.StringIO(), output=output)


@pytest.fixture
def scripted_reader():
    return ScriptedReader
