"""Scenario nodes the coordinator works with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Step:
    """One line of a scenario.

    Arguments hold the step's table or doc string nodes, if any. Synthetic
    steps built by the coordinator carry no arguments and reuse the line of
    the step that triggered them so reports can correlate the two.
    """

    keyword: str
    text: str
    arguments: tuple[Any, ...] = ()
    line: int = 0

    def __str__(self) -> str:
        return f"{self.keyword} {self.text}"


@dataclass(frozen=True)
class Feature:
    """The feature file a step belongs to."""

    title: str
    file: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExecutionContext:
    """Environment and feature pairing shared by every step of one call.

    The environment is whatever the step definitions expect as their first
    argument (a context object, a fixture namespace, ...).
    """

    environment: Any
    feature: Feature
