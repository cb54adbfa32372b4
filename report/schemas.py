#  (C) Copyright
#  Logivations GmbH, Munich 2025
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class Member:
    email: str

    @classmethod
    def from_api(cls, member: Dict[str, Any]) -> "Member":
        return cls(email=member.get("email", ""))


@dataclass
class Group:
    id: str
    name: str
    email: str
    direct_members_count: int = 0
    aliases: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, group: Dict[str, Any]) -> "Group":
        """Build a group from a Directory API group resource.

        directMembersCount is serialized as a string by the API.
        """
        return cls(
            id=group.get("id", ""),
            name=group.get("name", ""),
            email=group.get("email", ""),
            direct_members_count=int(group.get("directMembersCount", 0)),
            aliases=list(group.get("aliases", [])),
        )


@dataclass
class Page:
    groups: List[Group]
    next_page_token: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return bool(self.next_page_token)


@dataclass
class ReportSummary:
    pages: int = 0
    groups: int = 0
    empty_pages: int = 0


class CsvHeaders(Enum):
    EN = ("ID", "Name", "Address", "GroupMemberCount", "Aliases", "Members")
    JA = ("ID", "名前", "アドレス", "グループ人数", "別名", "メンバー")

    @classmethod
    def for_locale(cls, locale: str) -> "CsvHeaders":
        try:
            return cls[locale.upper()]
        except KeyError:
            raise ValueError(f"Unsupported header locale: {locale}")


class Notices(Enum):
    NO_GROUPS = "No groups found."
    EMPTY_PAGE = "Unable to retrieve next page in the list: Empty Groups returned."
