from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    answers = [e for e in events if e["type"] == "funnel_answer"]
    completions = [e for e in events if e["type"] == "funnel_complete"]
    resets = [e for e in events if e["type"] == "funnel_reset"]
    stale = [e for e in events if e["type"] == "funnel_stale_reset"]
    results = [e for e in events if e["type"] == "results"]

    # First-question answers that are not edits
    starts = [a for a in answers if a.get("step") == 0 and not a.get("edited")]

    # Categories by activity
    cat_counter: Counter[str] = Counter()
    for a in answers:
        cat_counter[a.get("category", "unknown")] += 1
    top_categories = [{"name": n, "count": c} for n, c in cat_counter.most_common(10)]

    # Answer distribution per category/question
    distribution: dict[str, dict[str, Counter[str]]] = defaultdict(lambda: defaultdict(Counter))
    for a in answers:
        distribution[a.get("category", "unknown")][a.get("question_id", "?")][a.get("option_id", "?")] += 1
    answer_distribution = {
        cat: {qid: dict(counter) for qid, counter in questions.items()}
        for cat, questions in distribution.items()
    }

    # Results served
    times = [r["response_time_ms"] for r in results if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0
    empty_results = sum(1 for r in results if r.get("results_returned", 0) == 0)

    return {
        "total_answers": len(answers),
        "funnel_starts": len(starts),
        "funnel_completions": len(completions),
        "completion_rate": round(len(completions) / len(starts) * 100, 1) if starts else 0.0,
        "edits": sum(1 for a in answers if a.get("edited")),
        "resets": len(resets),
        "stale_resets": len(stale),
        "top_categories": top_categories,
        "answer_distribution": answer_distribution,
        "results_summary": {
            "total": len(results),
            "no_matches": empty_results,
            "avg_response_time_ms": avg_time,
        },
    }
