"""Journal entry record and its persisted JSON form - no I/O dependencies.

Every text field is optional: ``None`` means the field was absent from the
stored record, which the codec treats differently from an empty string.
"""

import json
from dataclasses import dataclass

PREVIEW_LENGTH = 80


class EntryFormatError(Exception):
    """Raised when a stored entry cannot be decoded."""

    pass


def _text(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise EntryFormatError(f"Field '{key}' must be a string, got {type(value).__name__}")


def _texts(data: dict, key: str) -> list[str] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise EntryFormatError(f"Field '{key}' must be a list of strings")
    return list(value)


def _section(data: dict, key: str) -> dict | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise EntryFormatError(f"Section '{key}' must be an object, got {type(value).__name__}")
    return value


def _compact(data: dict) -> dict:
    """Drop absent fields so they stay absent after a round trip."""
    return {k: v for k, v in data.items() if v is not None}


@dataclass
class Cover:
    title: str | None = None
    subtitle: str | None = None
    owner: str | None = None

    def to_dict(self) -> dict:
        return _compact({"title": self.title, "subtitle": self.subtitle, "owner": self.owner})

    @classmethod
    def from_dict(cls, data: dict) -> "Cover":
        return cls(
            title=_text(data, "title"),
            subtitle=_text(data, "subtitle"),
            owner=_text(data, "owner"),
        )


@dataclass
class Letter:
    date: str | None = None
    greeting: str | None = None
    body: str | None = None

    def to_dict(self) -> dict:
        return _compact({"date": self.date, "greeting": self.greeting, "body": self.body})

    @classmethod
    def from_dict(cls, data: dict) -> "Letter":
        return cls(
            date=_text(data, "date"),
            greeting=_text(data, "greeting"),
            body=_text(data, "body"),
        )


@dataclass
class Gratitude:
    title: str | None = None
    subtitle: str | None = None
    cards: list[str] | None = None
    items: list[str] | None = None
    quote: str | None = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "title": self.title,
                "subtitle": self.subtitle,
                "cards": self.cards,
                "list": self.items,
                "quote": self.quote,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Gratitude":
        return cls(
            title=_text(data, "title"),
            subtitle=_text(data, "subtitle"),
            cards=_texts(data, "cards"),
            items=_texts(data, "list"),
            quote=_text(data, "quote"),
        )


@dataclass
class Dreams:
    title: str | None = None
    dreams: list[str] | None = None
    dream_images: list[str] | None = None
    goals_title: str | None = None
    vision_images: list[str] | None = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "title": self.title,
                "dreams": self.dreams,
                "dreamImages": self.dream_images,
                "goalsTitle": self.goals_title,
                "visionImages": self.vision_images,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Dreams":
        return cls(
            title=_text(data, "title"),
            dreams=_texts(data, "dreams"),
            dream_images=_texts(data, "dreamImages"),
            goals_title=_text(data, "goalsTitle"),
            vision_images=_texts(data, "visionImages"),
        )


@dataclass
class MemoryPhoto:
    """A polaroid slot: an embedded data URI (or no image) and its caption."""

    image: str | None = None
    caption: str = ""

    def to_dict(self) -> dict:
        # image is kept even when None: an empty slot is still a slot
        return {"image": self.image, "caption": self.caption}

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryPhoto":
        if not isinstance(data, dict):
            raise EntryFormatError("Memory photo must be an object")
        return cls(image=_text(data, "image"), caption=_text(data, "caption") or "")


@dataclass
class Memories:
    title: str | None = None
    photos: list[MemoryPhoto] | None = None
    memory_text: str | None = None
    memory_date: str | None = None

    def to_dict(self) -> dict:
        return _compact(
            {
                "title": self.title,
                "photos": [p.to_dict() for p in self.photos] if self.photos is not None else None,
                "memoryText": self.memory_text,
                "memoryDate": self.memory_date,
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Memories":
        photos = data.get("photos")
        if photos is not None and not isinstance(photos, list):
            raise EntryFormatError("Field 'photos' must be a list")
        return cls(
            title=_text(data, "title"),
            photos=[MemoryPhoto.from_dict(p) for p in photos] if photos is not None else None,
            memory_text=_text(data, "memoryText"),
            memory_date=_text(data, "memoryDate"),
        )


@dataclass
class Notes:
    title: str | None = None
    content: str | None = None

    def to_dict(self) -> dict:
        return _compact({"title": self.title, "content": self.content})

    @classmethod
    def from_dict(cls, data: dict) -> "Notes":
        return cls(title=_text(data, "title"), content=_text(data, "content"))


@dataclass
class BackCover:
    quote: str | None = None

    def to_dict(self) -> dict:
        return _compact({"quote": self.quote})

    @classmethod
    def from_dict(cls, data: dict) -> "BackCover":
        return cls(quote=_text(data, "quote"))


@dataclass
class JournalEntry:
    """All journal content for one calendar date."""

    cover: Cover | None = None
    dedication: str | None = None
    dedication_date: str | None = None
    letter: Letter | None = None
    continued: str | None = None
    sticky_note: str | None = None
    gratitude: Gratitude | None = None
    dreams: Dreams | None = None
    memories: Memories | None = None
    notes: Notes | None = None
    back_cover: BackCover | None = None

    def preview(self, limit: int = PREVIEW_LENGTH) -> str:
        """Letter body, else free notes, truncated to `limit` characters."""
        body = self.letter.body if self.letter else None
        if body:
            return body[:limit]
        content = self.notes.content if self.notes else None
        if content:
            return content[:limit]
        return ""

    def to_dict(self) -> dict:
        """Persisted form, using the journal's camelCase keys."""

        def sub(section):
            return section.to_dict() if section is not None else None

        return _compact(
            {
                "cover": sub(self.cover),
                "dedication": self.dedication,
                "dedicationDate": self.dedication_date,
                "letter": sub(self.letter),
                "continued": self.continued,
                "stickyNote": self.sticky_note,
                "gratitude": sub(self.gratitude),
                "dreams": sub(self.dreams),
                "memories": sub(self.memories),
                "notes": sub(self.notes),
                "backCover": sub(self.back_cover),
            }
        )

    @classmethod
    def from_dict(cls, data: dict) -> "JournalEntry":
        if not isinstance(data, dict):
            raise EntryFormatError(f"Entry must be an object, got {type(data).__name__}")

        def sub(key, section_cls):
            section = _section(data, key)
            return section_cls.from_dict(section) if section is not None else None

        return cls(
            cover=sub("cover", Cover),
            dedication=_text(data, "dedication"),
            dedication_date=_text(data, "dedicationDate"),
            letter=sub("letter", Letter),
            continued=_text(data, "continued"),
            sticky_note=_text(data, "stickyNote"),
            gratitude=sub("gratitude", Gratitude),
            dreams=sub("dreams", Dreams),
            memories=sub("memories", Memories),
            notes=sub("notes", Notes),
            back_cover=sub("backCover", BackCover),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "JournalEntry":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise EntryFormatError(f"Entry is not valid JSON: {e}") from e
        return cls.from_dict(data)
