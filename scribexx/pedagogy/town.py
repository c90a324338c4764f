"""
OWL town: locations and the writing quests offered at each.
"""

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from scribexx.engines.progress.mastery import SkillMastery, SkillType


class WritingStyle(str, Enum):
    ARGUMENTATIVE = "argumentative"
    INFORMATIVE = "informative"
    NARRATIVE = "narrative"
    REFLECTIVE = "reflective"
    DESCRIPTIVE = "descriptive"


class TownLocation(BaseModel):
    """A place in town. Unlock state lives on the learner's progress, not here."""

    id: str
    name: str
    description: str
    icon: str
    style: WritingStyle
    quest_ids: List[str]


class QuestRequirements(BaseModel):
    skill_mastery: SkillMastery
    completed_quests: List[str] = Field(default_factory=list)


class WritingQuest(BaseModel):
    """A writing assignment offered at a location."""

    id: str
    location_id: str
    title: str
    description: str
    tags: List[str]
    min_word_count: int
    skill_focus: SkillType
    level: int
    requirements: QuestRequirements


def _quest(
    quest_id: str,
    location_id: str,
    title: str,
    description: str,
    tags: List[str],
    min_word_count: int,
    skill_focus: SkillType,
    level: int,
    required: tuple[int, int, int],
    prerequisites: Optional[List[str]] = None,
) -> WritingQuest:
    mechanics, sequencing, voice = required
    return WritingQuest(
        id=quest_id,
        location_id=location_id,
        title=title,
        description=description,
        tags=tags,
        min_word_count=min_word_count,
        skill_focus=skill_focus,
        level=level,
        requirements=QuestRequirements(
            skill_mastery=SkillMastery(mechanics=mechanics, sequencing=sequencing, voice=voice),
            completed_quests=prerequisites or [],
        ),
    )


TOWN_LOCATIONS: List[TownLocation] = [
    TownLocation(
        id="townHall",
        name="Town Hall",
        description="Perfect for persuasive and argumentative writing",
        icon="building",
        style=WritingStyle.ARGUMENTATIVE,
        quest_ids=["town-hall-1", "town-hall-2", "town-hall-3"],
    ),
    TownLocation(
        id="library",
        name="Library",
        description="Ideal for research-based and informative writing",
        icon="book",
        style=WritingStyle.INFORMATIVE,
        quest_ids=["library-1", "library-2", "library-3"],
    ),
    TownLocation(
        id="amphitheater",
        name="Amphitheater",
        description="The place for narrative and creative storytelling",
        icon="theater",
        style=WritingStyle.NARRATIVE,
        quest_ids=["music-hall-1", "music-hall-2"],
    ),
    TownLocation(
        id="cafe",
        name="Café",
        description="A cozy spot for reflective and journal writing",
        icon="coffee",
        style=WritingStyle.REFLECTIVE,
        quest_ids=["cafe-1", "cafe-2"],
    ),
    TownLocation(
        id="park",
        name="Nature Park",
        description="Inspiration for descriptive and nature writing",
        icon="tree",
        style=WritingStyle.DESCRIPTIVE,
        quest_ids=["park-1", "park-2"],
    ),
]

WRITING_QUESTS: List[WritingQuest] = [
    # Town Hall
    _quest(
        "town-hall-1", "townHall", "Voice of the Community",
        "Write a letter to the editor about an issue that matters to your community. "
        "Focus on making your argument persuasive using evidence and a strong voice.",
        ["Persuasive", "Community", "Voice"], 150, SkillType.VOICE, 1, (0, 0, 0),
    ),
    _quest(
        "town-hall-2", "townHall", "Town Improvement Proposal",
        "Create a proposal for improving some aspect of the town. Include a clear problem "
        "statement, proposed solution, and expected benefits.",
        ["Proposal", "Problem-Solution", "Sequencing"], 200, SkillType.SEQUENCING, 2, (20, 20, 10),
        ["town-hall-1"],
    ),
    _quest(
        "town-hall-3", "townHall", "Historical Town Chronicle",
        "Research and write about a (fictional) historical event in the town's past. "
        "Use descriptive language to bring the event to life.",
        ["Historical", "Narrative", "Description"], 250, SkillType.VOICE, 3, (30, 30, 30),
        ["town-hall-2"],
    ),
    # Library
    _quest(
        "library-1", "library", "Book Review",
        "Write a thoughtful review of your favorite book. Include a summary, your opinion, "
        "and specific examples that support your assessment.",
        ["Review", "Analysis", "Opinion"], 200, SkillType.SEQUENCING, 1, (10, 10, 0),
    ),
    _quest(
        "library-2", "library", "Character Analysis",
        "Select a character from a story and analyze their motivations, actions, and "
        "development throughout the narrative.",
        ["Analysis", "Character", "Evidence"], 250, SkillType.SEQUENCING, 2, (20, 30, 10),
        ["library-1"],
    ),
    _quest(
        "library-3", "library", "Short Story",
        "Create an original short story with a clear beginning, middle, and end. "
        "Include descriptive language and dialogue.",
        ["Creative", "Narrative", "Fiction"], 300, SkillType.VOICE, 3, (40, 40, 30),
        ["library-2"],
    ),
    # Amphitheater
    _quest(
        "music-hall-1", "amphitheater", "Short Story Beginning",
        "Write the opening paragraph of a creative story. Focus on establishing character, "
        "setting, and an engaging hook.",
        ["Creative", "Narrative", "Storytelling"], 150, SkillType.VOICE, 1, (10, 0, 10),
    ),
    _quest(
        "music-hall-2", "amphitheater", "Character Monologue",
        "Create a monologue for a character facing a difficult decision. Show their "
        "internal thoughts and emotional state.",
        ["Narrative", "Character", "Drama"], 200, SkillType.VOICE, 2, (20, 20, 30),
        ["music-hall-1"],
    ),
    # Café
    _quest(
        "cafe-1", "cafe", "Recipe Story",
        "Write a personal narrative that incorporates a favorite recipe. Include both the "
        "recipe steps and the story behind why it's meaningful to you.",
        ["Instructional", "Narrative", "Personal"], 250, SkillType.SEQUENCING, 2, (40, 30, 20),
    ),
    _quest(
        "cafe-2", "cafe", "Dialogue Scene",
        "Create a scene with dialogue between two or more characters. Focus on realistic "
        "conversation that reveals character traits.",
        ["Dialogue", "Character", "Scene"], 200, SkillType.VOICE, 3, (50, 40, 40),
        ["cafe-1"],
    ),
    # Park
    _quest(
        "park-1", "park", "Nature Description",
        "Write a detailed description of a natural setting, focusing on sensory details "
        "(sights, sounds, smells, textures).",
        ["Descriptive", "Nature", "Sensory"], 200, SkillType.VOICE, 2, (30, 20, 30),
    ),
    _quest(
        "park-2", "park", "Environmental Argument",
        "Write a persuasive essay about an environmental issue. Include clear arguments, "
        "evidence, and a call to action.",
        ["Persuasive", "Environmental", "Argument"], 300, SkillType.SEQUENCING, 3, (50, 50, 40),
        ["park-1"],
    ),
]

_LOCATIONS_BY_ID = {location.id: location for location in TOWN_LOCATIONS}
_QUESTS_BY_ID = {quest.id: quest for quest in WRITING_QUESTS}


def get_location_by_id(location_id: str) -> Optional[TownLocation]:
    return _LOCATIONS_BY_ID.get(location_id)


def get_quest_by_id(quest_id: str) -> Optional[WritingQuest]:
    return _QUESTS_BY_ID.get(quest_id)


def get_quests_for_location(location_id: str) -> List[WritingQuest]:
    """Quests owned by a location, in catalog order."""
    return [quest for quest in WRITING_QUESTS if quest.location_id == location_id]


def entry_quest(location_id: str) -> Optional[WritingQuest]:
    """
    The quest that gates a location: the lowest-level one, first in catalog
    order on ties. None for a location with no quests.
    """
    quests = get_quests_for_location(location_id)
    if not quests:
        return None
    return min(quests, key=lambda quest: quest.level)


def is_quest_available(
    quest: WritingQuest,
    owl_mastery: SkillMastery,
    completed_quests: Sequence[str] = (),
) -> bool:
    """OWL mastery meets every threshold and every prerequisite quest is done."""
    if not owl_mastery.meets(quest.requirements.skill_mastery):
        return False
    completed = set(completed_quests)
    return all(prerequisite in completed for prerequisite in quest.requirements.completed_quests)
