"""
Minimal sender model.

Applications normally bring their own sender and source objects; these
classes cover scripts, tests and console-style front ends.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class SimpleSender:
    """Sender with a name and a flat set of permission nodes.

    A permission node `a.b.*` grants every node starting with `a.b.`, and
    `*` grants everything.
    """

    name: str
    permissions: set[str] = field(default_factory=set)

    def has_permission(self, permission: str) -> bool:
        if "*" in self.permissions or permission in self.permissions:
            return True
        parts = permission.split(".")
        for i in range(1, len(parts)):
            if ".".join(parts[:i]) + ".*" in self.permissions:
                return True
        return False

    def __str__(self) -> str:
        return self.name


@dataclass
class SimpleSource:
    """Command source wrapping a sender."""

    sender: Any
