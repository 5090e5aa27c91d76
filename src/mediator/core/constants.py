"""Mediator constants."""

from __future__ import annotations

from typing import Literal

DeltaKind = Literal["push", "unshift", "shift", "pop", "clear"]
DELTA_KINDS: tuple[DeltaKind, ...] = ("push", "unshift", "shift", "pop", "clear")

# Fired with the mediator as its only argument after every queue mutation
DELTA_EVENT = "__mediator.delta"

DEFAULT_MAX_DELTA_DEPTH = 8
