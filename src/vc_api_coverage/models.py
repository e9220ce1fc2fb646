# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Core data models for component API coverage.

This module defines the structures passed between the extraction engine,
the coverage matcher and external renderers:
- Category: Enum-like class for the four API categories
- ImportBinding: A locally bound name and the module/export it comes from
- MemberList: Ordered, duplicate-free sequence of member names
- ComponentAPISurface: The four MemberLists of one component
- CoverageEntry / CoverageReport: Per-member coverage flags
- ComponentCoverage: Surface and report of one analyzed file

All models serialize to JSON-compatible primitives for renderers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

# Exported name used for default imports/exports
DEFAULT_EXPORT = "default"


class Category:
    """API categories of a component.

    Design: Using class constants (not Enum) for JSON-compatible strings.
    """

    INPUTS = "inputs"  # props
    EVENTS = "events"  # emits
    SLOTS = "slots"
    EXPOSED = "exposedMembers"  # expose / defineExpose

    ALL = (INPUTS, EVENTS, SLOTS, EXPOSED)


@dataclass(frozen=True)
class ImportBinding:
    """Association between a local name and its originating module export.

    For `import { a as b } from './m'` the binding is
    local_name="b", source_module="./m", exported_name="a".
    Default imports use exported_name=DEFAULT_EXPORT.
    """

    local_name: str
    source_module: str
    exported_name: str

    @property
    def is_default(self) -> bool:
        return self.exported_name == DEFAULT_EXPORT


class MemberList:
    """Ordered sequence of unique member names.

    Insertion order is preserved and re-inserting an existing name is a
    no-op, so the first-seen position of a name is stable.
    """

    def __init__(self, names: Optional[Iterable[str]] = None) -> None:
        self._names: Dict[str, None] = {}
        if names is not None:
            self.extend(names)

    def add(self, name: str) -> bool:
        """Add a name if not already present.

        Returns:
            True if the name was added, False if it was already present.
        """
        if not name or name in self._names:
            return False
        self._names[name] = None
        return True

    def extend(self, names: Iterable[str]) -> None:
        for name in names:
            self.add(name)

    def to_list(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MemberList):
            return self.to_list() == other.to_list()
        if isinstance(other, list):
            return self.to_list() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"MemberList({self.to_list()!r})"


@dataclass
class ComponentAPISurface:
    """Public interface surface of one component.

    Each list is duplicate-free on its own; the lists are independent, so a
    name may appear in more than one category.
    """

    inputs: MemberList = field(default_factory=MemberList)
    events: MemberList = field(default_factory=MemberList)
    slots: MemberList = field(default_factory=MemberList)
    exposed_members: MemberList = field(default_factory=MemberList)

    def get(self, category: str) -> MemberList:
        """Return the MemberList for a Category value."""
        if category == Category.INPUTS:
            return self.inputs
        if category == Category.EVENTS:
            return self.events
        if category == Category.SLOTS:
            return self.slots
        if category == Category.EXPOSED:
            return self.exposed_members
        raise KeyError(category)

    def is_empty(self) -> bool:
        return not any(self.get(category) for category in Category.ALL)

    def to_dict(self) -> Dict[str, List[str]]:
        return {category: self.get(category).to_list() for category in Category.ALL}

    @classmethod
    def from_dict(cls, data: Dict[str, List[str]]) -> "ComponentAPISurface":
        return cls(
            inputs=MemberList(data.get(Category.INPUTS, [])),
            events=MemberList(data.get(Category.EVENTS, [])),
            slots=MemberList(data.get(Category.SLOTS, [])),
            exposed_members=MemberList(data.get(Category.EXPOSED, [])),
        )


@dataclass(frozen=True)
class CoverageEntry:
    """Coverage flag of a single declared member."""

    name: str
    covered: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "covered": self.covered}


@dataclass
class CoverageReport:
    """One ordered CoverageEntry list per category.

    Each list mirrors the order and membership of the corresponding
    MemberList of the analyzed surface.
    """

    inputs: List[CoverageEntry] = field(default_factory=list)
    events: List[CoverageEntry] = field(default_factory=list)
    slots: List[CoverageEntry] = field(default_factory=list)
    exposed_members: List[CoverageEntry] = field(default_factory=list)

    def get(self, category: str) -> List[CoverageEntry]:
        if category == Category.INPUTS:
            return self.inputs
        if category == Category.EVENTS:
            return self.events
        if category == Category.SLOTS:
            return self.slots
        if category == Category.EXPOSED:
            return self.exposed_members
        raise KeyError(category)

    def counts(self, category: str) -> Dict[str, int]:
        """Return total/covered counts for one category."""
        entries = self.get(category)
        return {
            "total": len(entries),
            "covered": sum(1 for entry in entries if entry.covered),
        }

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            category: [entry.to_dict() for entry in self.get(category)]
            for category in Category.ALL
        }


@dataclass
class ComponentCoverage:
    """Surface and coverage report of one analyzed component file.

    This is the shape handed to renderers (terminal table, HTML, JSON).
    """

    file: str
    name: str
    surface: ComponentAPISurface
    report: CoverageReport

    @property
    def total(self) -> int:
        return sum(self.report.counts(category)["total"] for category in Category.ALL)

    @property
    def covered(self) -> int:
        return sum(self.report.counts(category)["covered"] for category in Category.ALL)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "name": self.name,
            "file": self.file,
            "total": self.total,
            "covered": self.covered,
        }
        for category in Category.ALL:
            counts = self.report.counts(category)
            result[category] = {
                "total": counts["total"],
                "covered": counts["covered"],
                "details": [entry.to_dict() for entry in self.report.get(category)],
            }
        return result
