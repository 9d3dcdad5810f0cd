"""Tracked app, news item and build snapshot models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

BRANCH_ORDER = ("public", "beta", "private")


class TrackedApp(BaseModel):
    """A Steam app id to poll, with an optional configured display name."""

    model_config = ConfigDict(frozen=True)

    appid: int
    name: Optional[str] = None


class NewsItem(BaseModel):
    """One post from ISteamNews/GetNewsForApp."""

    gid: str
    title: str = ""
    url: str = ""
    date: int
    appid: int
    author: str = ""
    feedlabel: str = ""

    @field_validator("gid", mode="before")
    @classmethod
    def gid_as_string(cls, v) -> str:
        # The API has served gids both as strings and as bare numbers
        if isinstance(v, int):
            return str(v)
        return v


class BranchBuild(BaseModel):
    name: str
    build_id: Optional[str] = None
    time_updated: int


class BuildSnapshot(BaseModel):
    """Last-update timestamps for the three deployment branches of an app."""

    public: BranchBuild
    beta: BranchBuild
    private: BranchBuild

    def in_priority_order(self) -> list[BranchBuild]:
        return [getattr(self, name) for name in BRANCH_ORDER]
