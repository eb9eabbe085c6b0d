from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _require_number(value: Any) -> Any:
    # no "10" -> 10.0 or True -> 1.0 coercion
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("durationSecs must be a number")
    return value


Number = Annotated[float, BeforeValidator(_require_number)]
Duration = Annotated[float, BeforeValidator(_require_number), Field(gt=0, allow_inf_nan=False)]


class SlideEntry(BaseModel):
    """One slide of the rotation: an image URL and how long it stays up.

    Only the camelCase keys are accepted; build entries in code with ``of``.
    """

    model_config = ConfigDict(frozen=True)

    image_url: str = Field(alias="imageUrl", min_length=1, strict=True)
    duration_secs: Duration = Field(alias="durationSecs")

    @field_validator("image_url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("imageUrl must not be blank")
        return value

    @classmethod
    def of(cls, image_url: str, duration_secs: float) -> SlideEntry:
        return cls.model_validate({"imageUrl": image_url, "durationSecs": duration_secs})


class ConfigDocument(BaseModel):
    """Layout of the persisted JSON file.

    ``durationSecs`` is the global slide duration; documents written before it
    existed leave it out and fall back to the first entry's duration.
    """

    duration_secs: Duration | None = Field(default=None, alias="durationSecs")
    entries: list[SlideEntry]


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")


# Response bodies


class Snapshot(_Camel):
    image_url: str | None = Field(default=None, alias="imageUrl")
    date_time: str = Field(alias="dateTime")


class Listing(_Camel):
    duration_secs: float = Field(alias="durationSecs")
    image_urls: list[str] = Field(alias="imageUrls")
    image_url: str | None = Field(default=None, alias="imageUrl")


class EntriesOut(_Camel):
    entries: list[SlideEntry]
    current_index: int | None = Field(default=None, alias="currentIndex")


# Request bodies. Slides always take the global duration, so only the
# rotation-wide bodies carry durationSecs.


class ImageCreateRequest(_Request):
    image_url: str = Field(alias="imageUrl")


class ImageDeleteRequest(_Request):
    image_url: str = Field(alias="imageUrl")


class ImageModifyRequest(_Request):
    image_url: str | None = Field(default=None, alias="imageUrl")
    duration_secs: Number | None = Field(default=None, alias="durationSecs")


class EntryIn(_Request):
    image_url: str = Field(alias="imageUrl")


class EntryInsertRequest(EntryIn):
    index: int


class ReplaceAllRequest(_Request):
    duration_secs: Number | None = Field(default=None, alias="durationSecs")
    image_urls: list[str] = Field(alias="imageUrls")


class ReorderRequest(_Request):
    image_urls: list[str] = Field(alias="imageUrls")
