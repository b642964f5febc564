from unittest.mock import MagicMock
import pytest


@pytest.fixture
def logger():
    return MagicMock()


class Widget:
    """Stand-in for a toolkit widget; identity is all the containers need."""

    def __init__(self, name, visible=True):
        self.name = name
        self.visible = visible

    def __repr__(self):
        return f"Widget({self.name!r})"


@pytest.fixture
def make_widgets():
    def factory(*names, visible=True):
        return [Widget(name, visible) for name in names]

    return factory
