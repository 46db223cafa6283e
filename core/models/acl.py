# ============================================================================
# ACCESS CONTROL LIST MODEL
# ============================================================================
# STATUS: Core model - Per-job access control lists
# PURPOSE: Parse and evaluate "users groups" ACL strings
# CREATED: 07 OCT 2026
# EXPORTS: AccessControlList
# DEPENDENCIES: pydantic
# ============================================================================
"""
Access Control List

ACL strings use the cluster convention:

    "alice,bob analysts,ops"   users alice and bob, groups analysts and ops
    "alice"                    user alice only
    " analysts"                group analysts only
    "*"                        everyone
    ""                         nobody (only the owner, checked by the job)
"""

from typing import FrozenSet, Iterable
from pydantic import BaseModel, Field

WILDCARD = "*"


def _split(names: str) -> FrozenSet[str]:
    return frozenset(n.strip() for n in names.split(",") if n.strip())


class AccessControlList(BaseModel):
    """Users and groups granted one kind of job permission."""
    users: FrozenSet[str] = Field(default_factory=frozenset)
    groups: FrozenSet[str] = Field(default_factory=frozenset)
    allow_all: bool = False

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, acl_string: str) -> "AccessControlList":
        """Parse an ACL string."""
        if acl_string.strip() == WILDCARD:
            return cls(allow_all=True)
        users_part, _, groups_part = acl_string.partition(" ")
        return cls(users=_split(users_part), groups=_split(groups_part))

    def is_user_allowed(self, user: str, groups: Iterable[str] = ()) -> bool:
        if self.allow_all:
            return True
        if user in self.users:
            return True
        return any(g in self.groups for g in groups)

    def __str__(self) -> str:
        if self.allow_all:
            return WILDCARD
        users = ",".join(sorted(self.users))
        if not self.groups:
            return users
        return f"{users} {','.join(sorted(self.groups))}"


__all__ = ["AccessControlList"]
