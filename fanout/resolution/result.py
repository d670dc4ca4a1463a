from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CategoryResult:
    """Addresses gathered for one recipient category, or the fault that emptied it."""
    name: str
    addresses: set[str] = field(default_factory=set)
    fault: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.fault is None
