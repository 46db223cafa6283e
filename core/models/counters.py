# ============================================================================
# COUNTERS MODEL
# ============================================================================
# STATUS: Core model - Named numeric metrics
# PURPOSE: Counter groups scoped to a job, task or attempt
# CREATED: 07 OCT 2026
# EXPORTS: Counter, CounterGroup, Counters
# DEPENDENCIES: pydantic
# ============================================================================
"""
Counters Model

Counters are grouped by name (e.g. "org.apache.hadoop.mapreduce.TaskCounter")
and each group holds named integer values. The scheduler owns and updates
them; this API reads them and aggregates copies for job-level reporting.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class Counter(BaseModel):
    """A single named counter value."""
    name: str
    display_name: Optional[str] = None
    value: int = 0


class CounterGroup(BaseModel):
    """A named group of counters."""
    name: str
    display_name: Optional[str] = None
    counters: Dict[str, Counter] = Field(default_factory=dict)

    def find(self, name: str) -> Optional[Counter]:
        return self.counters.get(name)

    def increment(self, name: str, amount: int = 1) -> Counter:
        counter = self.counters.get(name)
        if counter is None:
            counter = Counter(name=name)
            self.counters[name] = counter
        counter.value += amount
        return counter

    def all_counters(self) -> List[Counter]:
        return list(self.counters.values())


class Counters(BaseModel):
    """All counter groups for one job, task or attempt."""
    groups: Dict[str, CounterGroup] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, int]]) -> "Counters":
        """
        Build counters from {"group": {"COUNTER": value}}.

        Example:
            Counters.from_dict({"TaskCounter": {"MAP_INPUT_RECORDS": 10}})
        """
        counters = cls()
        for group_name, values in data.items():
            group = counters.get_group(group_name)
            for counter_name, value in values.items():
                group.increment(counter_name, value)
        return counters

    def get_group(self, name: str) -> CounterGroup:
        """Get a group, creating it if absent."""
        group = self.groups.get(name)
        if group is None:
            group = CounterGroup(name=name)
            self.groups[name] = group
        return group

    def find_counter(self, group: str, name: str) -> Optional[Counter]:
        found = self.groups.get(group)
        return found.find(name) if found else None

    def increment_all(self, other: "Counters") -> None:
        """Add every counter of another set into this one."""
        for group in list(other.groups.values()):
            mine = self.get_group(group.name)
            if mine.display_name is None:
                mine.display_name = group.display_name
            for counter in group.all_counters():
                mine.increment(counter.name, counter.value)
                if counter.display_name and mine.counters[counter.name].display_name is None:
                    mine.counters[counter.name].display_name = counter.display_name

    def all_groups(self) -> List[CounterGroup]:
        return list(self.groups.values())


__all__ = ["Counter", "CounterGroup", "Counters"]
