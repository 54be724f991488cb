"""Pytest fixtures for questionnaire tests."""

from typing import Any, Callable, List

import pytest

from yaml_questionnaire.prompts import Form


def scripted_runner(*answers: Any) -> Callable[[Form], None]:
    """Form runner that writes ``answers`` into the slots in prompt order."""

    def _run(form: Form) -> None:
        fields = [prompt for group in form.groups for prompt in group.fields]
        assert len(fields) == len(answers), f"expected {len(fields)} answers, got {len(answers)}"
        for prompt, answer in zip(fields, answers):
            prompt.slot.value = answer

    return _run


@pytest.fixture
def answers() -> Callable[..., Callable[[Form], None]]:
    """Factory for scripted form runners."""
    return scripted_runner


@pytest.fixture
def recording_runner():
    """Runner that records every form it is handed without answering."""
    calls: List[Form] = []

    def _run(form: Form) -> None:
        calls.append(form)

    _run.calls = calls
    return _run
