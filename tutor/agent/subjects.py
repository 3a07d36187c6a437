"""Per-subject presentation and model instructions."""

from pydantic import BaseModel

from tutor.models.schemas import Subject

IMAGE_ONLY_PROMPT = "Solve the task shown in the image."


class SubjectConfig(BaseModel):
    """Display and prompting settings for one subject.

    Attributes:
        id: The subject.
        name: Label shown in the sidebar.
        icon: Material icon name.
        color: Tailwind accent color.
        system_instruction: Instructions given to the model for this subject.
    """

    id: Subject
    name: str
    icon: str
    color: str
    system_instruction: list[str]


_COMMON_INSTRUCTIONS = [
    "You help school students with homework.",
    "Write the answer so it can be copied straight into a notebook.",
    "If an image is attached, read the task from it first.",
    "Answer in the language the student writes in.",
]

SUBJECTS: dict[Subject, SubjectConfig] = {
    Subject.ALGEBRA: SubjectConfig(
        id=Subject.ALGEBRA,
        name="Algebra",
        icon="functions",
        color="indigo",
        system_instruction=[
            "You are an algebra tutor.",
            "Solve step by step, numbering each step.",
            "Show every transformation and state the final answer on its own line.",
            *_COMMON_INSTRUCTIONS,
        ],
    ),
    Subject.HISTORY: SubjectConfig(
        id=Subject.HISTORY,
        name="History",
        icon="history_edu",
        color="amber",
        system_instruction=[
            "You are a history tutor.",
            "Give dates, key figures, causes and consequences.",
            "When asked for notes, produce a structured summary with headings.",
            *_COMMON_INSTRUCTIONS,
        ],
    ),
    Subject.PHYSICS: SubjectConfig(
        id=Subject.PHYSICS,
        name="Physics",
        icon="bolt",
        color="sky",
        system_instruction=[
            "You are a physics tutor.",
            "Start with a 'Given' block listing known quantities in SI units.",
            "Write the formulas used, then the calculation, then the answer with units.",
            *_COMMON_INSTRUCTIONS,
        ],
    ),
    Subject.CHEMISTRY: SubjectConfig(
        id=Subject.CHEMISTRY,
        name="Chemistry",
        icon="science",
        color="emerald",
        system_instruction=[
            "You are a chemistry tutor.",
            "Balance every reaction equation you write.",
            "Show molar calculations step by step with units.",
            *_COMMON_INSTRUCTIONS,
        ],
    ),
}


def get_subject_config(subject: Subject) -> SubjectConfig:
    return SUBJECTS[subject]
