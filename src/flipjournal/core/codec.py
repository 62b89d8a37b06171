"""Entry codec - converts between the displayed page and entry records.

Pure functions over JournalPage; nothing here touches storage.
"""

from .entry import (
    BackCover,
    Cover,
    Dreams,
    Gratitude,
    JournalEntry,
    Letter,
    Memories,
    MemoryPhoto,
    Notes,
)
from .page import (
    DREAM_SLIP_DEFAULTS,
    DREAM_SLIP_PLACEHOLDER,
    GRATITUDE_CARD_DEFAULTS,
    GRATITUDE_CARD_PLACEHOLDER,
    LETTER_BODY_PLACEHOLDER,
    NOTES_PLACEHOLDER,
    JournalPage,
    PhotoSlot,
)


def serialize(page: JournalPage) -> JournalEntry:
    """Capture every displayed field. Missing values become empty strings."""
    return JournalEntry(
        cover=Cover(
            title=page.cover_title or "",
            subtitle=page.cover_subtitle or "",
            owner=page.owner_name or "",
        ),
        dedication=page.dedication or "",
        dedication_date=page.dedication_date or "",
        letter=Letter(
            date=page.letter_date or "",
            greeting=page.letter_greeting or "",
            body=page.letter_body or "",
        ),
        continued=page.continued or "",
        sticky_note=page.sticky_note or "",
        gratitude=Gratitude(
            title=page.gratitude_title or "",
            subtitle=page.gratitude_subtitle or "",
            cards=[text or "" for text in page.gratitude_cards],
            items=[text or "" for text in page.gratitude_list],
            quote=page.gratitude_quote or "",
        ),
        dreams=Dreams(
            title=page.dreams_title or "",
            dreams=[text or "" for text in page.dream_slips],
            dream_images=[src or "" for src in page.dream_images],
            goals_title=page.goals_title or "",
            vision_images=[src or "" for src in page.vision_images],
        ),
        memories=Memories(
            title=page.memories_title or "",
            photos=[
                MemoryPhoto(image=slot.image or None, caption=slot.caption or "")
                for slot in page.memory_photos
            ],
            memory_text=page.memory_text or "",
            memory_date=page.memory_date or "",
        ),
        notes=Notes(title=page.notes_title or "", content=page.notes_content or ""),
        back_cover=BackCover(quote=page.closing_quote or ""),
    )


def _put(page: JournalPage, attr: str, value: str | None) -> None:
    if value is not None:
        setattr(page, attr, value)


def _fill(slots: list, values: list | None, convert=lambda v: v) -> None:
    """Write values into slots by position; surplus values are dropped."""
    if values is None:
        return
    for i, value in enumerate(values[: len(slots)]):
        slots[i] = convert(value)


def deserialize(entry: JournalEntry, page: JournalPage) -> None:
    """
    Write the present fields of `entry` into `page`.

    Absent (None) fields and slots beyond the record's lists keep whatever
    the page already shows.
    """
    if entry.cover:
        _put(page, "cover_title", entry.cover.title)
        _put(page, "cover_subtitle", entry.cover.subtitle)
        _put(page, "owner_name", entry.cover.owner)

    _put(page, "dedication", entry.dedication)
    _put(page, "dedication_date", entry.dedication_date)

    if entry.letter:
        _put(page, "letter_date", entry.letter.date)
        _put(page, "letter_greeting", entry.letter.greeting)
        _put(page, "letter_body", entry.letter.body)
    _put(page, "continued", entry.continued)
    _put(page, "sticky_note", entry.sticky_note)

    if entry.gratitude:
        _put(page, "gratitude_title", entry.gratitude.title)
        _put(page, "gratitude_subtitle", entry.gratitude.subtitle)
        _put(page, "gratitude_quote", entry.gratitude.quote)
        _fill(page.gratitude_cards, entry.gratitude.cards)
        _fill(page.gratitude_list, entry.gratitude.items)

    if entry.dreams:
        _put(page, "dreams_title", entry.dreams.title)
        _put(page, "goals_title", entry.dreams.goals_title)
        _fill(page.dream_slips, entry.dreams.dreams)
        _fill(page.dream_images, entry.dreams.dream_images)
        _fill(page.vision_images, entry.dreams.vision_images)

    if entry.memories:
        _put(page, "memories_title", entry.memories.title)
        _put(page, "memory_text", entry.memories.memory_text)
        _put(page, "memory_date", entry.memories.memory_date)
        _fill(
            page.memory_photos,
            entry.memories.photos,
            lambda photo: PhotoSlot(image=photo.image or "", caption=photo.caption),
        )

    if entry.notes:
        _put(page, "notes_title", entry.notes.title)
        _put(page, "notes_content", entry.notes.content)

    if entry.back_cover:
        _put(page, "closing_quote", entry.back_cover.quote)


def reset_page(page: JournalPage) -> None:
    """Show the fresh-day placeholders for a date with no stored entry."""
    page.letter_body = LETTER_BODY_PLACEHOLDER
    page.continued = ""
    page.notes_content = NOTES_PLACEHOLDER

    for i in range(len(page.gratitude_cards)):
        page.gratitude_cards[i] = (
            GRATITUDE_CARD_DEFAULTS[i] if i < len(GRATITUDE_CARD_DEFAULTS) else GRATITUDE_CARD_PLACEHOLDER
        )
    for i in range(len(page.dream_slips)):
        page.dream_slips[i] = DREAM_SLIP_DEFAULTS[i] if i < len(DREAM_SLIP_DEFAULTS) else DREAM_SLIP_PLACEHOLDER

    # Photos belong to a single day
    page.dream_images[:] = [""] * len(page.dream_images)
    page.vision_images[:] = [""] * len(page.vision_images)
    page.memory_photos[:] = [PhotoSlot() for _ in page.memory_photos]
