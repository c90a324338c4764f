"""
REDI exercise catalog and exercise-map status.

Each exercise trains one skill axis. An exercise becomes reachable once the
learner's REDI mastery on that axis is at least (level - 1) * 10.
"""

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel

from scribexx.engines.progress.mastery import SkillMastery, SkillType


class ExerciseType(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    WRITING = "writing"


class ExerciseStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    AVAILABLE = "available"
    LOCKED = "locked"


class Exercise(BaseModel):
    """A REDI exercise."""

    id: str
    title: str
    level: int  # 1-5
    skill_type: SkillType
    exercise_type: ExerciseType = ExerciseType.MULTIPLE_CHOICE
    instructions: str
    content: str
    options: Optional[List[str]] = None
    correct_option_index: Optional[int] = None
    prompt: Optional[str] = None
    min_word_count: Optional[int] = None
    example_response: Optional[str] = None

    @property
    def mastery_requirement(self) -> int:
        return (self.level - 1) * 10

    def check_answer(self, option_index: int) -> bool:
        return self.correct_option_index is not None and option_index == self.correct_option_index


EXERCISES: List[Exercise] = [
    # Mechanics
    Exercise(
        id="mechanics-1",
        title="Grammar Basics",
        level=1,
        skill_type=SkillType.MECHANICS,
        instructions="Choose the sentence with correct grammar",
        content="Read each option and select the sentence with proper grammar.",
        options=[
            "The books is on the table.",
            "The books are on the table.",
            "The books on the table.",
            "The books be on the table.",
        ],
        correct_option_index=1,
    ),
    Exercise(
        id="mechanics-2",
        title="Punctuation",
        level=2,
        skill_type=SkillType.MECHANICS,
        instructions="Select the correctly punctuated sentence",
        content="Choose the option with proper punctuation.",
        options=[
            "Where are you going.",
            "Where are you going!",
            "Where are you going?",
            "Where are you going,",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="mechanics-3",
        title="Subject-Verb Agreement",
        level=3,
        skill_type=SkillType.MECHANICS,
        instructions="Select the sentence with correct subject-verb agreement",
        content="Read each option and choose the sentence where the subject and verb properly agree.",
        options=[
            "The team are working on different projects.",
            "The team is working on different projects.",
            "The group of students are working on their projects.",
            "The group of students is working on their projects.",
        ],
        correct_option_index=3,
    ),
    Exercise(
        id="mechanics-4",
        title="Tense Consistency",
        level=4,
        skill_type=SkillType.MECHANICS,
        instructions="Choose the sentence with consistent verb tense",
        content="Identify the sentence that maintains a consistent verb tense throughout.",
        options=[
            "She went to the store and buys some apples.",
            "She goes to the store and bought some apples.",
            "She went to the store and bought some apples.",
            "She goes to the store and buys some apples, then she left.",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="mechanics-5",
        title="Apostrophe Usage",
        level=5,
        skill_type=SkillType.MECHANICS,
        instructions="Select the sentence with correct apostrophe usage",
        content="Identify proper use of apostrophes in possessives and contractions.",
        options=[
            "The dogs bone is under the table.",
            "The dog's bone is under the table.",
            "The dogs' bone is under the table.",
            "The dog's bone's under the table.",
        ],
        correct_option_index=1,
    ),
    # Sequencing
    Exercise(
        id="sequencing-1",
        title="Paragraph Order",
        level=1,
        skill_type=SkillType.SEQUENCING,
        instructions="Choose the correct sequence for these sentences",
        content=(
            "Which order would make these sentences a logical paragraph?\n"
            "1. Then, add the eggs and mix well.\n"
            "2. First, combine the flour and sugar.\n"
            "3. Finally, bake for 30 minutes.\n"
            "4. Next, pour the batter into a pan."
        ),
        options=["1, 2, 3, 4", "2, 1, 4, 3", "4, 3, 2, 1", "2, 3, 1, 4"],
        correct_option_index=1,
    ),
    Exercise(
        id="sequencing-2",
        title="Topic Sentences",
        level=2,
        skill_type=SkillType.SEQUENCING,
        instructions="Identify the topic sentence",
        content=(
            "Although many people think of spiders as insects, they are actually arachnids. "
            "Spiders have eight legs, while insects have only six. Unlike insects, spiders don't "
            "have antennae or wings. Another difference is that spiders have two body segments, "
            "while insects have three. These differences are important to scientists who study arthropods."
        ),
        options=[
            "Spiders have eight legs, while insects have only six.",
            "Although many people think of spiders as insects, they are actually arachnids.",
            "These differences are important to scientists who study arthropods.",
            "Another difference is that spiders have two body segments, while insects have three.",
        ],
        correct_option_index=1,
    ),
    Exercise(
        id="sequencing-3",
        title="Paragraph Flow",
        level=3,
        skill_type=SkillType.SEQUENCING,
        instructions="Select the sentence that best continues the paragraph",
        content=(
            "Recycling has many benefits for our environment. It reduces the amount of waste "
            "sent to landfills. It also conserves natural resources and prevents pollution."
        ),
        options=[
            "However, not everyone agrees about climate change.",
            "My family recycles paper, plastic, and glass.",
            "Furthermore, recycling helps save energy and reduces greenhouse gas emissions.",
            "Plastic water bottles are very common litter items.",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="sequencing-4",
        title="Transition Words",
        level=4,
        skill_type=SkillType.SEQUENCING,
        instructions="Choose the best transition word or phrase",
        content="I wanted to go to the concert. __________, I couldn't afford the tickets.",
        options=["Furthermore", "However", "Similarly", "Consequently"],
        correct_option_index=1,
    ),
    Exercise(
        id="sequencing-5",
        title="Logical Organization",
        level=5,
        skill_type=SkillType.SEQUENCING,
        instructions="Identify the best organizational structure",
        content=(
            "You're writing an essay about the causes and effects of climate change. "
            "Which organizational structure would work best?"
        ),
        options=[
            "Chronological order (events by time)",
            "Cause and effect structure",
            "Compare and contrast structure",
            "Spatial organization (by location)",
        ],
        correct_option_index=1,
    ),
    # Writing
    Exercise(
        id="mechanics-writing-1",
        title="Fix Grammar Errors",
        level=3,
        skill_type=SkillType.MECHANICS,
        exercise_type=ExerciseType.WRITING,
        instructions="Rewrite the paragraph, correcting all grammar errors",
        content="In this exercise, you will practice identifying and fixing grammar errors in a short paragraph.",
        prompt=(
            "The following paragraph contains several grammar errors. Rewrite it with correct grammar:\n\n"
            "Last week, me and my friend goes to the store. We buyed some snacks and drinks for the party. "
            "When we gets home, my sister help us to set up. There was many people at the party. "
            "Everyone have a good time."
        ),
        min_word_count=50,
        example_response=(
            "Last week, my friend and I went to the store. We bought some snacks and drinks for the party. "
            "When we got home, my sister helped us to set up. There were many people at the party. "
            "Everyone had a good time."
        ),
    ),
    Exercise(
        id="voice-writing-1",
        title="Write a Personal Narrative",
        level=3,
        skill_type=SkillType.VOICE,
        exercise_type=ExerciseType.WRITING,
        instructions="Write a short personal narrative about a memorable experience",
        content="Practice using descriptive language and appropriate tone to convey your personal experience.",
        prompt=(
            "Write a short personal narrative about a time when you tried something new. How did you feel "
            "before, during, and after the experience? Use descriptive language that engages the readers senses."
        ),
        min_word_count=100,
    ),
    # Voice
    Exercise(
        id="voice-1",
        title="Audience Awareness",
        level=1,
        skill_type=SkillType.VOICE,
        instructions="Select the sentence with appropriate tone for a formal essay",
        content="You're writing a research paper for school. Which sentence has the most appropriate tone?",
        options=[
            "This stuff about climate change is pretty scary, you know?",
            "Climate change is like, a really big problem for everyone.",
            "The evidence suggests that climate change poses significant challenges to global ecosystems.",
            "OMG! Climate change is THE WORST thing ever!!!",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="voice-2",
        title="Vivid Language",
        level=2,
        skill_type=SkillType.VOICE,
        instructions="Choose the sentence with the most vivid descriptive language",
        content="Select the option that paints the clearest picture in the reader's mind.",
        options=[
            "The dog ran in the yard.",
            "The golden retriever sprinted across the sun-dappled lawn, ears flapping in the breeze.",
            "The canine moved quickly outside in the yard area.",
            "The dog, which was in the yard, ran around a lot and seemed happy about it.",
        ],
        correct_option_index=1,
    ),
    Exercise(
        id="voice-3",
        title="Active vs. Passive Voice",
        level=3,
        skill_type=SkillType.VOICE,
        instructions="Identify the sentence written in active voice",
        content="Select the option that uses active rather than passive voice.",
        options=[
            "The ball was thrown by the pitcher.",
            "The window was broken by the storm.",
            "The committee is considering the proposal.",
            "It was decided by the judges that the contest would be canceled.",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="voice-4",
        title="Persuasive Language",
        level=4,
        skill_type=SkillType.VOICE,
        instructions="Choose the most persuasive statement",
        content=(
            "You're writing to convince your school to start a recycling program. "
            "Which statement is most persuasive?"
        ),
        options=[
            "You should start a recycling program.",
            "I think it would be nice to have recycling bins.",
            "By implementing a recycling program, our school could reduce waste by 40% and save $3,000 annually.",
            "Recycling is good for the environment, so we should do it.",
        ],
        correct_option_index=2,
    ),
    Exercise(
        id="voice-5",
        title="Emotional Appeal",
        level=5,
        skill_type=SkillType.VOICE,
        instructions="Select the sentence with the strongest emotional appeal",
        content="You're writing about animal adoption. Which sentence creates the strongest emotional connection?",
        options=[
            "Animal shelters have many pets available for adoption.",
            "The statistical data shows increased adoption rates in the spring months.",
            "Approximately 6.5 million companion animals enter shelters each year.",
            "Every day, lonely animals wait in shelters, hoping for someone to give them a loving forever home.",
        ],
        correct_option_index=3,
    ),
]

_EXERCISES_BY_ID = {exercise.id: exercise for exercise in EXERCISES}


def get_exercise_by_id(exercise_id: str) -> Optional[Exercise]:
    return _EXERCISES_BY_ID.get(exercise_id)


def get_exercises_for_skill(skill: SkillType) -> List[Exercise]:
    return [exercise for exercise in EXERCISES if exercise.skill_type == skill]


def _is_reachable(exercise: Exercise, mastery: SkillMastery) -> bool:
    return mastery.get(exercise.skill_type) >= exercise.mastery_requirement


def exercise_status(
    exercise: Exercise,
    mastery: SkillMastery,
    completed_exercises: Sequence[str] = (),
) -> ExerciseStatus:
    """
    Map status for one exercise.

    The single lowest-level reachable, uncompleted exercise across the whole
    catalog is "current"; ties go to catalog order.
    """
    completed = set(completed_exercises)
    if exercise.id in completed:
        return ExerciseStatus.COMPLETED
    if not _is_reachable(exercise, mastery):
        return ExerciseStatus.LOCKED

    open_exercises = [
        candidate for candidate in EXERCISES
        if candidate.id not in completed and _is_reachable(candidate, mastery)
    ]
    current = min(open_exercises, key=lambda candidate: candidate.level)
    if current.id == exercise.id:
        return ExerciseStatus.CURRENT
    return ExerciseStatus.AVAILABLE


def exercise_map(
    mastery: SkillMastery,
    completed_exercises: Sequence[str] = (),
) -> List[tuple[Exercise, ExerciseStatus]]:
    """Every catalog exercise paired with its status for this learner."""
    return [
        (exercise, exercise_status(exercise, mastery, completed_exercises))
        for exercise in EXERCISES
    ]
