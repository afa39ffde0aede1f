"""Server-side state of the three-step community creation wizard."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from huddle.schemas.community import ChatRoomInput, CommunityCreate
from huddle.services.communities import validate_basic_info, validate_chat_rooms

STEP_BASIC_INFO = "basic-info"
STEP_CHAT_ROOMS = "chat-rooms"
STEP_SETTINGS = "settings"
STEPS = (STEP_BASIC_INFO, STEP_CHAT_ROOMS, STEP_SETTINGS)

_STEP_VALIDATORS = {
    STEP_BASIC_INFO: validate_basic_info,
    STEP_CHAT_ROOMS: validate_chat_rooms,
}


def _default_draft() -> CommunityCreate:
    return CommunityCreate(chat_rooms=[ChatRoomInput(name="general", type="text")])


@dataclass
class CommunityWizard:
    """Tracks the active step, the draft and its field errors."""

    step: str = STEP_BASIC_INFO
    draft: CommunityCreate = field(default_factory=_default_draft)
    errors: dict[str, str] = field(default_factory=dict)

    def update(self, **changes: Any) -> None:
        """Apply field changes; a new country always clears the city."""
        if "country" in changes and changes["country"] != self.draft.country:
            changes.setdefault("city", "")
        self.draft = self.draft.model_copy(update=changes)
        for key in changes:
            self.errors.pop(key, None)

    def select_country(self, country: str) -> None:
        self.update(country=country, city="")

    def select_city(self, city: str) -> None:
        self.update(city=city)

    def add_tag(self, tag: str) -> None:
        """Append a trimmed tag unless it is blank or already present."""
        tag = tag.strip()
        if tag and tag not in self.draft.tags:
            self.update(tags=[*self.draft.tags, tag])

    def remove_tag(self, tag: str) -> None:
        self.update(tags=[t for t in self.draft.tags if t != tag])

    def validate_step(self, step: str | None = None) -> bool:
        validator = _STEP_VALIDATORS.get(step or self.step)
        self.errors = validator(self.draft) if validator else {}
        return not self.errors

    def next(self) -> bool:
        """Advance one step if the current one validates."""
        index = STEPS.index(self.step)
        if index == len(STEPS) - 1 or not self.validate_step():
            return False
        self.step = STEPS[index + 1]
        return True

    def back(self) -> None:
        index = STEPS.index(self.step)
        if index > 0:
            self.step = STEPS[index - 1]

    def go_to(self, step: str) -> bool:
        """Jump to ``step``; moving forward requires every skipped step to validate."""
        if step not in STEPS:
            raise ValueError(f"Unknown wizard step: {step}")
        current = STEPS.index(self.step)
        target = STEPS.index(step)
        for intermediate in STEPS[current:target]:
            if not self.validate_step(intermediate):
                return False
        self.step = step
        return True

    def reset(self) -> None:
        self.step = STEP_BASIC_INFO
        self.draft = _default_draft()
        self.errors = {}
