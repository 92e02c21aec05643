"""Shared pytest fixtures for md-delta tests."""

import itertools

import pytest

from delta.converter import MarkdownToDeltaConverter


@pytest.fixture
def counter_id_generator():
    """Deterministic row ids: "1", "2", "3", ..."""
    counter = itertools.count(1)

    def _generate() -> str:
        return str(next(counter))

    return _generate


@pytest.fixture
def converter(counter_id_generator):
    return MarkdownToDeltaConverter(table_id_generator=counter_id_generator)


@pytest.fixture
def env_override(monkeypatch):
    """Helper to override environment variables."""

    def _override(**kwargs):
        for key, value in kwargs.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)

    return _override
