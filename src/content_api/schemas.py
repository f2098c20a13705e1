######################################
# --- Domain and payload schemas --- #
######################################

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Language codes the site is published in. A record is translation-complete
# once every one of them has an entry in its `translations` map.
SUPPORTED_LANGUAGES = (
    "nl", "en", "de", "fr", "es",
    "it", "pt", "pl", "ru", "uk",
    "tr", "ar", "zh", "ja", "ko",
    "sv", "da", "no", "fi", "cs",
    "ro", "hu", "el", "bg", "hi",
)


def as_text(value: Any) -> Any:
    """Hand-edited documents hold numbers and nulls where text is expected."""
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentModel(CamelModel):
    """Stored content: keys this code does not know about are kept as they are."""
    model_config = ConfigDict(extra="allow")


class HeroSection(ContentModel):
    title: str = ""
    subtitle: str = ""

    @field_validator("title", "subtitle", mode="before")
    @classmethod
    def text_fields(cls, v):
        return as_text(v)


class SolutionsSection(ContentModel):
    title: str = ""
    description1: str = ""
    description2: str = ""
    projects_completed: str = ""
    years_experience: str = ""

    @field_validator(
        "title", "description1", "description2", "projects_completed", "years_experience", mode="before"
    )
    @classmethod
    def text_fields(cls, v):
        return as_text(v)


class ServicesSection(ContentModel):
    title: str = ""
    items: List[str] = Field(default_factory=list, description="Display order is preserved.")

    @field_validator("title", mode="before")
    @classmethod
    def title_as_text(cls, v):
        return as_text(v)

    @field_validator("items", mode="before")
    @classmethod
    def items_as_text(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [as_text(item) for item in v]
        return v


class ServiceContent(ContentModel):
    """The translatable part of a service page, in one language."""
    hero: HeroSection = Field(default_factory=HeroSection)
    solutions: SolutionsSection = Field(default_factory=SolutionsSection)
    services: ServicesSection = Field(default_factory=ServicesSection)

    @field_validator("hero", "solutions", "services", mode="before")
    @classmethod
    def missing_section_is_empty(cls, v):
        return {} if v is None else v

    def is_usable(self) -> bool:
        """An entry with an empty hero title or subtitle counts as missing."""
        return bool(self.hero.title and self.hero.subtitle)


class ServiceRecord(ServiceContent):
    """One service page, with its translations keyed by language code."""

    id: str
    translations: Optional[Dict[str, ServiceContent]] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v):
        # A missing id stays missing and fails validation.
        return v if v is None else as_text(v)

    @field_validator("translations", mode="before")
    @classmethod
    def drop_unusable_entries(cls, v):
        """Entries that are not objects (e.g. ``null``) are treated as absent."""
        if isinstance(v, dict):
            return {language: entry for language, entry in v.items() if isinstance(entry, (dict, ServiceContent))}
        return v

    def source_content(self) -> ServiceContent:
        return ServiceContent(hero=self.hero, solutions=self.solutions, services=self.services)

    def translations_count(self) -> int:
        return len(self.translations or {})

    def is_translation_complete(self) -> bool:
        present = set(self.translations or {})
        return all(language in present for language in SUPPORTED_LANGUAGES)

    def display_content(self, language: str) -> ServiceContent:
        """Content to render for `language`, falling back to the source fields."""
        translation = (self.translations or {}).get(language)
        if translation is not None and translation.is_usable():
            return translation
        return self.source_content()


def dump_collection(services: List[ServiceRecord]) -> List[dict]:
    """Serialize a collection to the on-disk camelCase shape.

    Unknown keys are written back as read, nulls included. Only an absent
    `translations` map is left out.
    """
    dumped = []
    for service in services:
        data = service.model_dump(by_alias=True)
        if data.get("translations") is None:
            data.pop("translations", None)
        dumped.append(data)
    return dumped


class RecordOutcome(CamelModel):
    """What happened to one candidate during a translation run."""
    id: str
    success: bool
    has_translations: bool
    translations_count: int
    error: Optional[str] = None


class TranslationReport(CamelModel):
    """Response model for `GET|POST /services-translate`."""
    success: bool = True
    message: str
    count: int = Field(description="Candidates attempted, or the record count when nothing needed work.")
    succeeded: int = 0
    failed: int = 0
    services: List[RecordOutcome] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Translated 1 service(s)",
                "count": 1,
                "succeeded": 1,
                "failed": 0,
                "services": [
                    {"id": "tiling", "success": True, "hasTranslations": True, "translationsCount": 25}
                ],
            }
        }
    )


class StoredAsset(CamelModel):
    file_name: str
    url: str
    size: int
    content_type: str


class UploadResponse(BaseModel):
    """Response model for `POST /upload`."""
    success: bool = True
    url: str
    fileName: str
    size: int
    type: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "url": "/uploads/1718030000000_hero.jpg",
                "fileName": "1718030000000_hero.jpg",
                "size": 48213,
                "type": "image/jpeg",
            }
        }
    )


class DeleteUploadResponse(BaseModel):
    """Response model for `DELETE /upload`."""
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
    code: Optional[str] = None
    details: Optional[str] = None
    hint: Optional[str] = None
