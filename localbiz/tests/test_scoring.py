from __future__ import annotations

import pytest

from localbiz.funnel.errors import CategoryMismatchError, IncompleteAnswerSetError
from localbiz.matching.scoring import rank_providers, score_providers
from localbiz.providers.models import Provider

FINE_DINING = {"budget": "fine-dining", "cuisine": "italian", "ambience": "romantic"}
CASUAL = {"budget": "casual", "cuisine": "italian"}


def _restaurant(pid: str, tags: list[str], **kwargs) -> Provider:
    return Provider(id=pid, name=pid.title(), category_key="restaurants-cafes", tags=tags, **kwargs)


def _ids(providers):
    return [p.id for p in providers]


# ── Preconditions ────────────────────────────────────────────────────────


class TestContract:
    def test_incomplete_answers_rejected(self):
        with pytest.raises(IncompleteAnswerSetError):
            score_providers("restaurants-cafes", {"budget": "fine-dining", "cuisine": "italian"}, [])

    def test_foreign_provider_rejected(self):
        plumber = Provider(id="p", name="Plumber", category_key="home-services")
        with pytest.raises(CategoryMismatchError):
            score_providers("restaurants-cafes", CASUAL, [plumber])

    def test_empty_provider_set_is_empty_result(self):
        assert score_providers("restaurants-cafes", CASUAL, []) == []


# ── Ordering ─────────────────────────────────────────────────────────────


class TestOrdering:
    def test_featured_wins_tie(self):
        plain = _restaurant("plain", ["italian", "fine-dining", "romantic"], rating=4.0)
        featured = _restaurant("featured", ["italian", "fine-dining", "romantic"], rating=4.0, is_member=True)
        ranked = rank_providers("restaurants-cafes", FINE_DINING, [plain, featured])
        assert ranked[0].score == ranked[1].score
        assert _ids(p.provider for p in ranked) == ["featured", "plain"]

    def test_is_featured_flag_also_counts(self):
        plain = _restaurant("plain", ["italian"])
        featured = _restaurant("featured", ["italian"], is_featured=True)
        assert _ids(score_providers("restaurants-cafes", CASUAL, [plain, featured])) == ["featured", "plain"]

    def test_cuisine_match_outweighs_featured(self):
        italian = _restaurant("italian", ["italian", "fine-dining", "romantic"])
        mexican = _restaurant("mexican", ["mexican", "fine-dining", "romantic"], is_member=True)
        ranked = rank_providers("restaurants-cafes", FINE_DINING, [mexican, italian])
        assert _ids(p.provider for p in ranked) == ["italian", "mexican"]
        assert ranked[0].score > ranked[1].score

    def test_rated_beats_unrated_at_equal_score(self):
        unrated = _restaurant("unrated", ["italian"])
        rated = _restaurant("rated", ["italian"], rating=2.5)
        assert _ids(score_providers("restaurants-cafes", CASUAL, [unrated, rated])) == ["rated", "unrated"]

    def test_input_order_is_final_tie_break(self):
        providers = [_restaurant(f"r{i}", ["italian"], rating=4.0) for i in range(5)]
        assert _ids(score_providers("restaurants-cafes", CASUAL, providers)) == ["r0", "r1", "r2", "r3", "r4"]
        reversed_input = list(reversed(providers))
        assert _ids(score_providers("restaurants-cafes", CASUAL, reversed_input)) == ["r4", "r3", "r2", "r1", "r0"]

    def test_scoring_is_deterministic(self):
        providers = [
            _restaurant("a", ["italian", "casual"], rating=4.1),
            _restaurant("b", ["pizza"], is_member=True),
            _restaurant("c", ["mexican", "$"]),
            _restaurant("d", ["italian", "casual"], rating=4.1),
        ]
        first = rank_providers("restaurants-cafes", CASUAL, providers)
        second = rank_providers("restaurants-cafes", CASUAL, providers)
        assert first == second


# ── Soft preferences ─────────────────────────────────────────────────────


class TestSoftPreferences:
    def test_synonym_earns_partial_credit(self):
        exact = _restaurant("exact", ["italian"])
        synonym = _restaurant("synonym", ["pizza"])
        none = _restaurant("none", ["sushi"])
        ranked = rank_providers("restaurants-cafes", CASUAL, [none, synonym, exact])
        scores = {s.provider.id: s.score for s in ranked}
        assert scores["exact"] > scores["synonym"] > scores["none"]
        assert scores["synonym"] == pytest.approx(0.75 * scores["exact"])

    def test_answer_inside_multi_word_tag_counts(self):
        plain = _restaurant("plain", ["italian food"])
        other = _restaurant("other", ["seafood"])
        ranked = rank_providers("restaurants-cafes", CASUAL, [other, plain])
        assert [s.provider.id for s in ranked] == ["plain", "other"]
        assert ranked[0].score == 8.0

    def test_dental_care_tag_matches_dental(self):
        clinic = Provider(id="clinic", name="Clinic", category_key="health-wellness", tags=["dental care"])
        gym = Provider(id="gym", name="Gym", category_key="health-wellness", tags=["fitness"])
        answers = {"type": "dental", "frequency": "monthly", "experience": "any", "location": "nearby"}
        assert _ids(score_providers("health-wellness", answers, [gym, clinic])) == ["clinic", "gym"]

    def test_term_must_stand_alone_in_tag(self):
        beds = Provider(id="beds", name="Beds", category_key="real-estate", tags=["0-3"])
        answers = {"need": "buy", "timeline": "6+", "budget": "high", "beds": "3"}
        assert rank_providers("real-estate", answers, [beds])[0].score == 0.0

    def test_specialties_count_as_attributes(self):
        tagged = _restaurant("tagged", [], specialties=["Pasta"])
        bare = _restaurant("bare", [])
        assert _ids(score_providers("restaurants-cafes", CASUAL, [bare, tagged])) == ["tagged", "bare"]

    def test_wildcard_answer_adds_nothing(self):
        a = _restaurant("a", ["italian"])
        b = _restaurant("b", ["mexican"])
        ranked = rank_providers("restaurants-cafes", {"budget": "moderate", "cuisine": "any"}, [a, b])
        assert ranked[0].score == ranked[1].score == 0.0

    def test_price_symbols_do_not_match_each_other(self):
        cheap = _restaurant("cheap", ["$"])
        pricey = _restaurant("pricey", ["$$"])
        ranked = rank_providers("restaurants-cafes", {"budget": "moderate", "cuisine": "any"}, [cheap, pricey])
        scores = {s.provider.id: s.score for s in ranked}
        assert scores["pricey"] > 0
        assert scores["cheap"] == 0


# ── Hard constraints ─────────────────────────────────────────────────────


class TestHardConstraints:
    def test_casual_budget_drops_fine_dining(self):
        luxe = _restaurant("luxe", ["italian", "$$$$"], is_member=True, rating=5.0)
        diner = _restaurant("diner", ["american"])
        assert _ids(score_providers("restaurants-cafes", CASUAL, [luxe, diner])) == ["diner"]

    def test_fine_dining_keeps_casual_providers(self):
        casual = _restaurant("casual", ["italian", "casual"])
        assert _ids(score_providers("restaurants-cafes", FINE_DINING, [casual])) == ["casual"]

    def test_stagers_hidden_unless_requested(self):
        agent = Provider(id="agent", name="Agent", category_key="real-estate", tags=["buy", "sell"])
        stager = Provider(id="stager", name="Stager", category_key="real-estate", tags=["stager", "sell"])
        buying = {"need": "buy", "timeline": "0-3", "budget": "mid", "beds": "3"}
        no_staging = {"need": "sell", "timeline": "0-3", "budget": "mid", "staging": "no"}
        with_staging = dict(no_staging, staging="yes")
        assert _ids(score_providers("real-estate", buying, [agent, stager])) == ["agent"]
        assert _ids(score_providers("real-estate", no_staging, [agent, stager])) == ["agent"]
        assert _ids(score_providers("real-estate", with_staging, [agent, stager])) == ["stager", "agent"]

    def test_service_area_requirement(self):
        local = Provider(id="local", name="Local", category_key="health-wellness", tags=["gym"], service_areas=["Bonita"])
        away = Provider(id="away", name="Away", category_key="health-wellness", tags=["gym"], service_areas=["La Jolla"])
        answers = {"type": "gym", "frequency": "weekly", "experience": "any", "location": "bonita"}
        assert _ids(score_providers("health-wellness", answers, [away, local])) == ["local"]
        answers["location"] = "flexible"
        assert _ids(score_providers("health-wellness", answers, [away, local])) == ["away", "local"]

    def test_constraint_beats_any_soft_score(self):
        perfect = Provider(
            id="perfect", name="Perfect", category_key="home-services",
            tags=["solar", "asap", "under-1k"], is_member=True, rating=5.0,
        )
        answers = {"type": "solar", "timeline": "asap", "budget": "under-1k", "property-type": "commercial"}
        assert score_providers("home-services", answers, [perfect]) == []


# ── Scenario ─────────────────────────────────────────────────────────────


def test_fine_dining_scenario():
    featured_italian = _restaurant("bella", ["italian", "fine-dining", "romantic"], is_member=True, rating=4.7)
    casual_italian = _restaurant("fresca", ["italian", "fine-dining", "romantic"], rating=4.9)
    mexican = _restaurant("loco", ["mexican", "fine-dining", "romantic"], rating=5.0)

    ranked = rank_providers("restaurants-cafes", FINE_DINING, [mexican, casual_italian, featured_italian])
    assert _ids(p.provider for p in ranked) == ["bella", "fresca", "loco"]
    assert ranked[0].score == ranked[1].score > ranked[2].score
