"""
Per-category scoring profiles.

A profile names the weight of each soft-preference question, the synonym
lists used to match an answer against provider tags, and the hard
constraints that remove a provider outright.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from ..providers.models import Provider

# Fraction of a question's weight earned through a synonym instead of an
# exact tag match.
SYNONYM_CREDIT = 0.75

# Answers that express no preference.
WILDCARD_ANSWERS = frozenset({"any", "none", "flexible"})


@dataclass(frozen=True)
class HardConstraint:
    """
    Applies when the answer to ``question_id`` is in ``when`` (or, if ``when``
    is empty, when it is NOT in ``unless``). An applicable constraint drops
    providers whose ``attribute`` values miss every ``require_any`` entry or
    hit any ``exclude_any`` entry.
    """

    question_id: str
    when: tuple[str, ...] = ()
    unless: tuple[str, ...] = ()
    attribute: str = "tags"
    require_any: tuple[str, ...] = ()
    exclude_any: tuple[str, ...] = ()

    def applies(self, answers: dict[str, str]) -> bool:
        answer = answers.get(self.question_id)
        if self.when:
            return answer in self.when
        return answer not in self.unless

    def excludes(self, provider: Provider, answers: dict[str, str]) -> bool:
        if not self.applies(answers):
            return False
        values = {v.strip().lower() for v in getattr(provider, self.attribute)}
        if self.require_any and not values & set(self.require_any):
            return True
        return bool(values & set(self.exclude_any))


@dataclass(frozen=True)
class ScoringProfile:
    weights: dict[str, float]
    synonyms: dict[str, dict[str, tuple[str, ...]]] = field(default_factory=dict)
    hard_constraints: tuple[HardConstraint, ...] = ()

    def synonyms_for(self, question_id: str, answer: str) -> tuple[str, ...]:
        return self.synonyms.get(question_id, {}).get(answer, ())


# ---------------------------------------------------------------------------
# Synonyms
# ---------------------------------------------------------------------------

CUISINE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "mexican": ("mexican restaurant", "tacos", "taco", "burrito", "burritos", "tex-mex", "texmex"),
    "asian": ("chinese", "japanese", "thai", "vietnamese", "korean", "indian", "sushi", "ramen", "pho", "dim sum"),
    "american": ("burger", "burgers", "bbq", "barbecue", "steak", "steakhouse", "diner"),
    "italian": ("italian restaurant", "pizza", "pasta", "trattoria", "ristorante"),
    "mediterranean": ("greek", "middle eastern", "falafel", "hummus", "gyro"),
}

RESTAURANT_BUDGET_SYNONYMS: dict[str, tuple[str, ...]] = {
    "casual": ("$", "budget", "budget-friendly", "cheap", "affordable", "inexpensive"),
    "moderate": ("$$", "mid-range", "reasonable"),
    "fine-dining": ("fine dining", "$$$$", "$$$", "upscale", "luxury", "gourmet"),
}

AMBIENCE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "romantic": ("date night", "intimate", "candle-lit"),
    "lively": ("bar", "live music", "sports bar"),
    "quiet": ("cozy", "calm", "garden"),
    "private-dining": ("private dining", "private room", "events"),
}

HEALTH_TYPE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "dental": ("dentist", "dentistry", "orthodontist", "orthodontics", "oral surgery"),
    "chiropractor": ("chiropractic", "spine", "adjustment"),
    "gym": ("fitness", "personal training", "crossfit", "yoga", "pilates"),
    "salon": ("hair", "nails", "beauty", "barber", "stylist"),
    "spa": ("med spa", "medspa", "massage", "facial"),
    "medical": ("doctor", "clinic", "primary care", "urgent care"),
    "therapy": ("counseling", "mental health", "physical therapy", "therapist"),
}

SALON_KIND_SYNONYMS: dict[str, tuple[str, ...]] = {
    "hair": ("haircut", "color", "stylist", "barber"),
    "nails": ("manicure", "pedicure", "nail"),
    "skin": ("facial", "esthetician", "skincare"),
    "brows-lashes": ("brows", "lashes", "threading", "waxing"),
}

HOME_TYPE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "landscaping": ("lawn care", "gardening", "irrigation", "tree trimming", "hardscape"),
    "solar": ("solar panels", "battery storage", "energy"),
    "cleaning": ("house cleaning", "maid", "janitorial", "carpet cleaning"),
    "remodeling": ("construction", "contractor", "kitchen remodel", "bathroom remodel"),
    "plumbing": ("plumber", "water heaters", "drain", "leak repair"),
    "electrical": ("electrician", "wiring", "panel upgrade"),
    "hvac": ("heating", "air conditioning", "ac repair", "furnace"),
}

STAGING_SYNONYMS: dict[str, tuple[str, ...]] = {
    "yes": ("staging", "stager", "home staging"),
}

# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

PROFILES: dict[str, ScoringProfile] = {
    "restaurants-cafes": ScoringProfile(
        weights={"cuisine": 8.0, "budget": 4.0, "ambience": 3.0},
        synonyms={
            "cuisine": CUISINE_SYNONYMS,
            "budget": RESTAURANT_BUDGET_SYNONYMS,
            "ambience": AMBIENCE_SYNONYMS,
        },
        hard_constraints=(
            HardConstraint(
                question_id="budget",
                when=("casual",),
                exclude_any=("$$$$", "fine-dining", "fine dining"),
            ),
        ),
    ),
    "real-estate": ScoringProfile(
        weights={"need": 2.0, "timeline": 1.0, "budget": 1.0, "beds": 1.0, "staging": 1.0},
        synonyms={"staging": STAGING_SYNONYMS},
        hard_constraints=(
            # Stagers only show up for sellers who asked for staging
            HardConstraint(
                question_id="staging",
                unless=("yes",),
                exclude_any=("stager", "staging"),
            ),
        ),
    ),
    "health-wellness": ScoringProfile(
        weights={"type": 5.0, "salon_kind": 3.0, "frequency": 1.0, "experience": 1.0},
        synonyms={"type": HEALTH_TYPE_SYNONYMS, "salon_kind": SALON_KIND_SYNONYMS},
        hard_constraints=(
            HardConstraint(
                question_id="location",
                when=("bonita",),
                attribute="service_areas",
                require_any=("bonita",),
            ),
        ),
    ),
    "home-services": ScoringProfile(
        weights={"type": 5.0, "timeline": 1.0, "budget": 1.0, "property-type": 1.0},
        synonyms={"type": HOME_TYPE_SYNONYMS},
        hard_constraints=(
            HardConstraint(
                question_id="property-type",
                when=("commercial",),
                require_any=("commercial",),
            ),
        ),
    ),
    "professional-services": ScoringProfile(
        weights={"service": 1.0, "urgency": 1.0, "business-size": 1.0, "budget": 1.0},
    ),
}


def get_profile(category: str) -> ScoringProfile:
    return PROFILES.get(category, PROFILES["professional-services"])
