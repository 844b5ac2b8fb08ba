"""
Question catalog.

Each category owns an ordered list of questions. Some questions carry a
``show_if`` dependency on earlier answers, so the active sequence is always
computed from the answers given so far rather than read as a fixed form.
"""
from __future__ import annotations

from .errors import UnknownCategoryError
from .models import Category, FunnelOption, Question


def _q(
    qid: str,
    prompt: str,
    options: list[tuple[str, str]],
    show_if: dict[str, tuple[str, ...]] | None = None,
) -> Question:
    return Question(
        id=qid,
        prompt=prompt,
        options=tuple(FunnelOption(id=oid, label=label) for oid, label in options),
        show_if=show_if or {},
    )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

CATEGORIES: dict[str, Category] = {
    "real-estate": Category(
        key="real-estate",
        name="Real Estate",
        description="Agents, brokers and stagers for buying, selling or renting.",
    ),
    "home-services": Category(
        key="home-services",
        name="Home Services",
        description="Contractors and trades for your home or property.",
    ),
    "health-wellness": Category(
        key="health-wellness",
        name="Health & Wellness",
        description="Dental, fitness, salon, spa and medical providers.",
    ),
    "restaurants-cafes": Category(
        key="restaurants-cafes",
        name="Restaurants & Cafes",
        description="Places to eat and drink around town.",
    ),
    "professional-services": Category(
        key="professional-services",
        name="Professional Services",
        description="Legal, accounting, consulting and other business services.",
    ),
}

# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

_QUESTIONS: dict[str, list[Question]] = {
    "real-estate": [
        _q("need", "What do you need help with?", [
            ("buy", "Buying"), ("sell", "Selling"), ("rent", "Renting"),
        ]),
        _q("timeline", "What's your timeline?", [
            ("0-3", "0–3 months"), ("3-6", "3–6 months"), ("6+", "6+ months"),
        ]),
        _q("budget", "Approximate budget?", [
            ("entry", "$"), ("mid", "$$"), ("high", "$$$"),
        ]),
        _q("beds", "Bedrooms", [
            ("2", "2+"), ("3", "3+"), ("4", "4+"),
        ], show_if={"need": ("buy", "rent")}),
        _q("staging", "Would you like help staging your home?", [
            ("yes", "Yes"), ("no", "No"),
        ], show_if={"need": ("sell",)}),
    ],
    "home-services": [
        _q("type", "Which service do you need?", [
            ("landscaping", "Landscaping"), ("solar", "Solar"),
            ("cleaning", "Cleaning"), ("remodeling", "Remodeling"),
            ("plumbing", "Plumbing"), ("electrical", "Electrical"),
            ("hvac", "HVAC"), ("other", "Other"),
        ]),
        _q("timeline", "What's your timeline?", [
            ("asap", "ASAP"), ("1-month", "Within 1 month"),
            ("3-months", "Within 3 months"), ("flexible", "Flexible"),
        ]),
        _q("budget", "Approximate budget?", [
            ("under-1k", "Under $1,000"), ("1k-5k", "$1,000 - $5,000"),
            ("5k-10k", "$5,000 - $10,000"), ("10k-plus", "$10,000+"),
        ]),
        _q("property-type", "Property type?", [
            ("single-family", "Single Family"), ("condo", "Condo"),
            ("townhouse", "Townhouse"), ("commercial", "Commercial"),
        ]),
    ],
    "health-wellness": [
        _q("type", "What type of service?", [
            ("dental", "Dental"), ("chiropractor", "Chiropractor"),
            ("gym", "Gym/Fitness"), ("salon", "Salon/Beauty"),
            ("spa", "Spa/MedSpa"), ("medical", "Medical"),
            ("therapy", "Therapy"), ("other", "Other"),
        ]),
        _q("salon_kind", "What kind of salon service?", [
            ("hair", "Hair"), ("nails", "Nails"),
            ("skin", "Skin care"), ("brows-lashes", "Brows & lashes"),
        ], show_if={"type": ("salon",)}),
        _q("frequency", "How often do you need this service?", [
            ("one-time", "One-time"), ("weekly", "Weekly"),
            ("monthly", "Monthly"), ("as-needed", "As needed"),
        ]),
        _q("experience", "Experience level?", [
            ("beginner", "Beginner"), ("intermediate", "Intermediate"),
            ("advanced", "Advanced"), ("any", "Any level"),
        ]),
        _q("location", "Preferred location?", [
            ("bonita", "Bonita"), ("nearby", "Nearby areas"),
            ("flexible", "Flexible"),
        ]),
    ],
    "restaurants-cafes": [
        _q("budget", "What kind of outing?", [
            ("casual", "Casual dining"), ("moderate", "Something nicer"),
            ("fine-dining", "Fine dining"),
        ]),
        _q("cuisine", "Cuisine preference?", [
            ("american", "American"), ("italian", "Italian"),
            ("mexican", "Mexican"), ("asian", "Asian"),
            ("mediterranean", "Mediterranean"), ("any", "Any cuisine"),
        ]),
        _q("ambience", "What atmosphere are you after?", [
            ("romantic", "Romantic"), ("lively", "Lively"),
            ("quiet", "Quiet"), ("private-dining", "Private dining"),
        ], show_if={"budget": ("fine-dining",)}),
    ],
    "professional-services": [
        _q("service", "What service do you need?", [
            ("legal", "Legal"), ("accounting", "Accounting"),
            ("consulting", "Consulting"), ("marketing", "Marketing"),
            ("insurance", "Insurance"), ("financial", "Financial Planning"),
            ("other", "Other"),
        ]),
        _q("urgency", "How urgent is this?", [
            ("urgent", "Very urgent"), ("soon", "Within a month"),
            ("planning", "Planning ahead"), ("exploring", "Just exploring"),
        ]),
        _q("business-size", "Business size?", [
            ("individual", "Individual"), ("small", "Small business"),
            ("medium", "Medium business"), ("enterprise", "Enterprise"),
        ]),
        _q("budget", "Budget range?", [
            ("under-1k", "Under $1,000"), ("1k-5k", "$1,000 - $5,000"),
            ("5k-15k", "$5,000 - $15,000"), ("15k-plus", "$15,000+"),
        ]),
    ],
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def list_categories() -> list[Category]:
    return list(CATEGORIES.values())


def get_category(key: str) -> Category:
    category = CATEGORIES.get(key)
    if category is None:
        raise UnknownCategoryError(key)
    return category


def _all_questions(category: str) -> list[Question]:
    get_category(category)
    return _QUESTIONS.get(category, [])


def find_question(category: str, question_id: str) -> Question | None:
    for q in _all_questions(category):
        if q.id == question_id:
            return q
    return None


def get_questions(category: str, answers: dict[str, str]) -> list[Question]:
    """
    Return the ordered question sequence for ``answers``.

    A question whose dependency is not met is left out entirely. Dependencies
    only see answers of questions that are themselves in the sequence, so an
    answer left behind by a hidden question never unlocks anything.
    """
    sequence: list[Question] = []
    active_ids: set[str] = set()
    for q in _all_questions(category):
        if q.is_shown(answers, active_ids):
            sequence.append(q)
            active_ids.add(q.id)
    return sequence


def reachable_question_ids(category: str) -> set[str]:
    """Every question id the catalog can produce for some answer combination."""
    questions = _all_questions(category)
    by_id = {q.id: q for q in questions}
    reachable: set[str] = set()
    for q in questions:
        ok = True
        for qid, allowed in q.show_if.items():
            parent = by_id.get(qid)
            if parent is None or qid not in reachable:
                ok = False
                break
            if not set(allowed) & set(parent.option_ids()):
                ok = False
                break
        if ok:
            reachable.add(q.id)
    return reachable


def first_unanswered(questions: list[Question], answers: dict[str, str]) -> int | None:
    for idx, q in enumerate(questions):
        if q.id not in answers:
            return idx
    return None


def is_complete(category: str, answers: dict[str, str]) -> bool:
    """Re-evaluated on every call; never cached."""
    questions = get_questions(category, answers)
    return bool(questions) and first_unanswered(questions, answers) is None
