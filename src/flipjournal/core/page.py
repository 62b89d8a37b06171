"""The displayed journal page as a plain data-transfer object."""

from dataclasses import dataclass, field

TOTAL_PAGES = 6

LETTER_BODY_PLACEHOLDER = "Dear Journal,\n\nToday..."
NOTES_PLACEHOLDER = "Write your thoughts here..."
GRATITUDE_CARD_DEFAULTS = ["Morning coffee ☕", "A good book 📚", "Sunshine 🌞"]
GRATITUDE_CARD_PLACEHOLDER = "I'm grateful for..."
DREAM_SLIP_DEFAULTS = ["Travel somewhere new ✈️", "Learn a new skill 🎨"]
DREAM_SLIP_PLACEHOLDER = "A dream..."


@dataclass
class PhotoSlot:
    """One memory polaroid on screen. An empty image means no photo yet."""

    image: str = ""
    caption: str = ""


# Values appended by add_slot() for each growable section
_NEW_SLOT = {
    "gratitude_cards": lambda: GRATITUDE_CARD_PLACEHOLDER,
    "gratitude_list": lambda: "",
    "dream_slips": lambda: DREAM_SLIP_PLACEHOLDER,
    "dream_images": lambda: "",
    "vision_images": lambda: "",
    "memory_photos": PhotoSlot,
}


@dataclass
class JournalPage:
    """
    Everything the journal currently displays.

    The view layer reads and writes this object; the codec converts it to and
    from JournalEntry records. Slot lists have a fixed length on screen and
    only grow through add_slot().
    """

    cover_title: str = "My Journal"
    cover_subtitle: str = "Thoughts, dreams & little moments"
    owner_name: str = ""
    dedication: str = "To me, with love."
    dedication_date: str = ""
    letter_date: str = ""
    letter_greeting: str = "Dear Journal,"
    letter_body: str = LETTER_BODY_PLACEHOLDER
    continued: str = ""
    sticky_note: str = "Don't forget to smile!"
    gratitude_title: str = "Gratitude"
    gratitude_subtitle: str = "Things I'm thankful for"
    gratitude_cards: list[str] = field(default_factory=lambda: list(GRATITUDE_CARD_DEFAULTS))
    gratitude_list: list[str] = field(default_factory=lambda: [""] * 5)
    gratitude_quote: str = ""
    dreams_title: str = "Dreams & Goals"
    dream_slips: list[str] = field(default_factory=lambda: list(DREAM_SLIP_DEFAULTS))
    dream_images: list[str] = field(default_factory=lambda: [""] * 2)
    goals_title: str = "Vision Board"
    vision_images: list[str] = field(default_factory=lambda: [""] * 4)
    memories_title: str = "Memories"
    memory_photos: list[PhotoSlot] = field(default_factory=lambda: [PhotoSlot() for _ in range(3)])
    memory_text: str = ""
    memory_date: str = ""
    notes_title: str = "Notes"
    notes_content: str = NOTES_PLACEHOLDER
    closing_quote: str = ""

    @classmethod
    def blank(cls) -> "JournalPage":
        return cls()

    def add_slot(self, section: str) -> int:
        """Append an empty slot to a growable section. Returns its index."""
        if section not in _NEW_SLOT:
            raise ValueError(f"Unknown slot section: {section}")
        slots = getattr(self, section)
        slots.append(_NEW_SLOT[section]())
        return len(slots) - 1
