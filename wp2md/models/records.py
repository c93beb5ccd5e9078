from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Images scraped from post HTML have no attachment record to key on.
SCRAPED_IMAGE_ID = "-1"


class Translation(BaseModel):
    link: str
    hreflang: str
    language: str


class Image(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    post_id: str
    url: str

    @property
    def is_scraped(self) -> bool:
        return self.id == SCRAPED_IMAGE_ID


class Gallery(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    attachment_ids: List[str] = Field(default_factory=list)


class Post(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # meta data: not written to the frontmatter, used while resolving
    id: str
    export_path: Optional[str] = None
    cover_image_id: Optional[str] = None
    image_urls: List[str] = Field(default_factory=list)
    language: str

    # frontmatter
    title: Optional[str] = None
    slug: Optional[str] = None
    date: str
    author: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    description: str = ""
    translations: List[Translation] = Field(default_factory=list)
    cover: Optional[str] = None

    content: str = ""

    @field_validator("tags", "image_urls", mode="before")
    @classmethod
    def _dedup(cls, v: Optional[List[str]]):
        if not v:
            return []
        seen = set()
        deduped = []
        for item in v:
            if item not in seen:
                seen.add(item)
                deduped.append(item)
        return deduped

    def add_image_url(self, url: str) -> bool:
        """Append ``url`` unless already present; return whether it was added."""
        if url in self.image_urls:
            return False
        self.image_urls.append(url)
        return True

    def frontmatter(self) -> dict[str, Any]:
        data = self.model_dump(
            include={"title", "slug", "date", "author", "tags", "description", "language", "translations", "cover"},
            exclude_none=True,
        )
        # keep a stable key order for the written files
        order = ["title", "slug", "date", "author", "tags", "description", "language", "translations", "cover"]
        return {key: data[key] for key in order if key in data}
