"""Decision values returned by the guard."""

from __future__ import annotations

from dataclasses import dataclass

DIAGNOSTIC_TAG = "#safemigrate"


@dataclass(frozen=True)
class Diagnostic:
    """Human-readable report for a blocked operation."""

    header: str
    body: str
    rule_key: str | None = None

    def render(self) -> str:
        return f"\n=== {self.header} {DIAGNOSTIC_TAG} ===\n\n{self.body}\n"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Proceed:
    """The operation may be forwarded to the executor."""

    exempt: bool = False

    @property
    def blocked(self) -> bool:
        return False


@dataclass(frozen=True)
class Block:
    """The operation must not run; the run stops here."""

    diagnostic: Diagnostic
    custom: bool = False

    @property
    def blocked(self) -> bool:
        return True


Decision = Proceed | Block
