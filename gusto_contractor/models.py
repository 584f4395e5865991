"""Data carried between the sheet, the workflow and the verifier"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gusto_contractor.reasoning.names import parse_full_name


@dataclass(frozen=True)
class Contractor:
    first_name: str
    last_name: str
    email: str
    full_name: str
    row: int

    @classmethod
    def from_row(cls, row, full_name, email):
        first_name, last_name = parse_full_name(full_name)
        return cls(
            first_name=first_name,
            last_name=last_name,
            email=email.strip(),
            full_name=full_name.strip(),
            row=row,
        )

    @property
    def display_name(self):
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class WorkflowRun:
    """Outcome of one submission attempt; only its summary outlives the row"""

    name: str
    steps_completed: List[str] = field(default_factory=list)
    success: bool = False
    errors: List[str] = field(default_factory=list)
    elapsed: float = 0.0
    failed_step: Optional[str] = None
    failed_step_index: Optional[int] = None  # 1-based


class Verdict(Enum):
    YES = "yes"
    NO = "no"
    UNRESOLVED = "unresolved"
