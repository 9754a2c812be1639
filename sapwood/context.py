"""Runtime scope threaded through action execution."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional


_MISSING = object()


@dataclass
class Context:
    """Mutable key/value scope passed to ``Action.execute``.

    The caller owns the context; actions borrow it for the duration of an
    execution and may read or assign variables through it.
    """

    variables: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Get a variable, or ``default`` when it is not set."""
        return self.variables.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Assign a variable, replacing any previous value."""
        self.variables[name] = value

    def has(self, name: str) -> bool:
        """Check whether a variable is set."""
        return name in self.variables

    def unset(self, name: str) -> Optional[Any]:
        """Remove a variable.

        Args:
            name: Variable to remove

        Returns:
            The removed value, or None if it was not set
        """
        value = self.variables.pop(name, _MISSING)
        return None if value is _MISSING else value

    def as_dict(self) -> Dict[str, Any]:
        """Return a shallow copy of the variables."""
        return dict(self.variables)

    def __contains__(self, name: object) -> bool:
        return name in self.variables

    def __iter__(self) -> Iterator[str]:
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)
