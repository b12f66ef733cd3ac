# SPDX-License-Identifier: MIT


class EntryType:
    EVENT = "event"
    THOUGHT = "thought"
    HABIT = "habit"
    FOOD = "food"
    HEALTH = "health"


ENTRY_TYPES: tuple[str, ...] = (
    EntryType.EVENT,
    EntryType.THOUGHT,
    EntryType.HABIT,
    EntryType.FOOD,
    EntryType.HEALTH,
)

# Types that are logged from the quick-log catalog instead of free text
QUICK_LOG_TYPES: tuple[str, ...] = (
    EntryType.HABIT,
    EntryType.FOOD,
    EntryType.HEALTH,
)

DEFAULT_ENTRY_TYPE = EntryType.EVENT

TYPE_ICONS: dict[str, str] = {
    EntryType.EVENT: "🎯",
    EntryType.THOUGHT: "💭",
    EntryType.HABIT: "✅",
    EntryType.FOOD: "🍽️",
    EntryType.HEALTH: "❤️",
}
