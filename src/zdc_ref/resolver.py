"""Chart query resolution.

Decides, for a list of charts returned by the charts API and the search
terms a user typed, whether there is exactly one chart to act on, several
equally plausible charts to list, or nothing worth showing.

Scoring works in two tiers. A chart whose title contains every query word
as a whole word gets a dominant bonus, plus the word-set overlap so the
tightest title wins inside that tier. Any other chart is scored by edit
distance similarity only. The top chart is accepted on its own only when it
clears ACCEPTANCE_FLOOR and beats the runner-up by SEPARATION_MARGIN.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .charts import ChartCandidate, ChartType, infer_chart_type
from .fuzzy import normalize_words, similarity

FULL_MATCH_BONUS = 1.0
TYPE_MATCH_BONUS = 0.1
ACCEPTANCE_FLOOR = 0.5
SEPARATION_MARGIN = 0.15
INCLUSION_FLOOR = 0.35


@dataclass(frozen=True)
class ChartMatch:
    """A chart with its composite score."""

    chart: ChartCandidate
    score: float


@dataclass(frozen=True)
class NoMatch:
    """Nothing scored above the acceptance floor."""

    query_words: tuple[str, ...] = ()


@dataclass(frozen=True)
class SingleMatch:
    """One chart is a confident hit."""

    match: ChartMatch

    @property
    def candidate(self) -> ChartCandidate:
        return self.match.chart


@dataclass(frozen=True)
class Ambiguous:
    """Several charts are too close to call, best first."""

    matches: tuple[ChartMatch, ...]

    @property
    def candidates(self) -> list[ChartCandidate]:
        return [m.chart for m in self.matches]


MatchResult = NoMatch | SingleMatch | Ambiguous


def _jaccard(a: set[str], b: set[str]) -> float:
    union = a | b
    return len(a & b) / len(union) if union else 0.0


def score_title(
    query_words: list[str],
    title: str,
    query_type: ChartType = ChartType.UNKNOWN,
    chart_type: ChartType = ChartType.UNKNOWN,
) -> float:
    """
    Composite score of a chart title against normalized query words.

    Returns a value in [1, 2] (plus type bonus) when every query word is a
    whole word of the title, otherwise a similarity in [0, 1] (plus bonus).
    """
    title_words = normalize_words(title)
    if not query_words or not title_words:
        return 0.0

    query_set = set(query_words)
    title_set = set(title_words)

    if query_set <= title_set:
        score = FULL_MATCH_BONUS + _jaccard(query_set, title_set)
    else:
        phrase = similarity(" ".join(query_words), " ".join(title_words))
        per_word = sum(
            max(similarity(qw, tw) for tw in title_words) for qw in query_words
        ) / len(query_words)
        score = max(phrase, per_word)

    if query_type != ChartType.UNKNOWN and chart_type == query_type:
        score += TYPE_MATCH_BONUS

    return score


def rank(
    candidates: Sequence[ChartCandidate], query_tokens: Sequence[str]
) -> list[ChartMatch]:
    """Score every candidate and sort best first, keeping input order on ties."""
    query_words = normalize_words(" ".join(query_tokens))
    query_type = infer_chart_type(" ".join(query_words))

    scored = [
        ChartMatch(
            chart=chart,
            score=score_title(query_words, chart.title, query_type, chart.chart_type),
        )
        for chart in candidates
    ]
    # sorted() is stable, so equal scores stay in API order
    return sorted(scored, key=lambda m: m.score, reverse=True)


def resolve(
    candidates: Sequence[ChartCandidate], query_tokens: Sequence[str]
) -> MatchResult:
    """
    Pick the chart the user most likely meant.

    Args:
        candidates: Charts for one airport, in API order
        query_tokens: Search terms after the airport id (e.g. ["ILS", "28R"])

    Returns:
        NoMatch, SingleMatch or Ambiguous. Never raises.
    """
    query_words = tuple(normalize_words(" ".join(query_tokens)))
    if not candidates or not query_words:
        return NoMatch(query_words)

    ranked = rank(candidates, query_tokens)
    best = ranked[0]

    if best.score < ACCEPTANCE_FLOOR:
        return NoMatch(query_words)

    runner_up = ranked[1].score if len(ranked) > 1 else 0.0
    if best.score - runner_up >= SEPARATION_MARGIN:
        return SingleMatch(best)

    cutoff = max(INCLUSION_FLOOR, best.score - SEPARATION_MARGIN)
    return Ambiguous(tuple(m for m in ranked if m.score >= cutoff))
