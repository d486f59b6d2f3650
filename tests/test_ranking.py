import pytest

from kbqa.analysis.question_analyzer import DefaultQuestionAnalyzer
from kbqa.catalog.registry import EMPTY_CATALOG, TemplateCatalog
from kbqa.contracts.collaborators import ParameterSubstitutor, QuestionAnalyzer, SimilarityMetric
from kbqa.contracts.models import BoundQuery, QueryTemplate, QuestionProperties, Token
from kbqa.errors import ConfigError
from kbqa.matching.matcher import TemplateMatcher
from kbqa.matching.ranking import TIE_BREAK_STEP, RankingAggregator
from kbqa.tracing import TraceCollector

REPR = "What is the capital of France"


class FixedSimilarity(SimilarityMetric):
    name = "fixed"

    def __init__(self, scores):
        self.scores = scores

    def score(self, a, b):
        return self.scores.get(a, 0.0)


class FixedAnalyzer(QuestionAnalyzer):
    def __init__(self, props):
        self.props = props

    def analyze(self, tokens):
        return self.props


class EchoSubstitutor(ParameterSubstitutor):
    """One candidate per template unless the template id is listed as unbindable."""

    def __init__(self, unbindable=(), return_none=()):
        self.unbindable = set(unbindable)
        self.return_none = set(return_none)

    def bind(self, tokens, example, template):
        if template.id in self.return_none:
            return None
        if template.id in self.unbindable:
            return []
        return [BoundQuery(query=template.query_bodies[0], body=template.query_bodies[0], example=example)]


class FailingSubstitutor(ParameterSubstitutor):
    def bind(self, tokens, example, template):
        raise RuntimeError("binding failed")


def _tmpl(tid, example, start_words=("What",), superlative=False):
    return QueryTemplate(
        id=tid, start_words=frozenset(start_words), superlative=superlative,
        examples=(example,), query_bodies=(f"SELECT ?x WHERE {{ ?x ?p '{tid}' }}",),
    )


def _aggregator(templates, scores, substitutor=None, ranking_order="offset", props=None):
    return RankingAggregator(
        catalog=TemplateCatalog(tuple(templates)),
        analyzer=FixedAnalyzer(props or QuestionProperties("What", False, REPR)),
        matcher=TemplateMatcher(FixedSimilarity(scores)),
        substitutor=substitutor or EchoSubstitutor(),
        ranking_order=ranking_order,
    )


def test_capital_scenario_single_entry():
    t1 = _tmpl("t1", "What is the capital of X")
    t2 = _tmpl("t2", "What is the population of X")
    agg = _aggregator([t1, t2], {"What is the capital of X": 0.90, "What is the population of X": 0.30})
    ranked = agg.match([])
    assert len(ranked) == 1
    (key,) = list(ranked)
    assert key == pytest.approx(0.901)
    assert ranked[key][0].body == t1.query_bodies[0]
    assert ranked.best().template is t1


def test_empty_catalog_returns_empty_mapping():
    agg = RankingAggregator(
        catalog=EMPTY_CATALOG,
        analyzer=DefaultQuestionAnalyzer(),
        matcher=TemplateMatcher(FixedSimilarity({})),
        substitutor=EchoSubstitutor(),
    )
    ranked = agg.match([Token("What"), Token("is"), Token("France", kind="resource", uri="http://x/France")])
    assert len(ranked) == 0
    assert dict(ranked) == {}
    assert ranked.best() is None


def test_equal_scores_keep_both_with_distinct_keys():
    t1 = _tmpl("t1", "a")
    t2 = _tmpl("t2", "b")
    ranked = _aggregator([t1, t2], {"a": 0.70, "b": 0.70}).match([])
    keys = list(ranked)
    assert len(keys) == 2
    assert keys[0] == pytest.approx(0.702)
    assert keys[1] == pytest.approx(0.701)
    assert [e.template.id for e in ranked.entries] == ["t2", "t1"]


def test_offset_counts_rejected_templates():
    rejected = _tmpl("t1", "a", start_words=("Who",))
    low = _tmpl("t2", "b")
    accepted = _tmpl("t3", "c")
    ranked = _aggregator([rejected, low, accepted], {"a": 0.9, "b": 0.1, "c": 0.6}).match([])
    assert list(ranked) == [pytest.approx(0.6 + 3 * TIE_BREAK_STEP)]
    assert ranked.best().position == 3


def test_empty_or_missing_bindings_are_dropped():
    templates = [_tmpl("t1", "a"), _tmpl("t2", "b"), _tmpl("t3", "c")]
    sub = EchoSubstitutor(unbindable={"t1"}, return_none={"t2"})
    ranked = _aggregator(templates, {"a": 0.9, "b": 0.9, "c": 0.6}, substitutor=sub).match([])
    assert [e.template.id for e in ranked.entries] == ["t3"]
    assert all(ranked[k] for k in ranked)


def test_keys_bounded_unique_and_output_not_larger_than_catalog():
    n = 40
    templates = [_tmpl(f"t{i}", f"e{i}") for i in range(n)]
    scores = {f"e{i}": [0.5, 0.7, 1.0, 0.2][i % 4] for i in range(n)}
    ranked = _aggregator(templates, scores).match([])
    keys = list(ranked)
    assert len(keys) <= n
    assert len(set(keys)) == len(keys)
    assert all(0.5 <= k <= 1.0 + TIE_BREAK_STEP * n for k in keys)
    assert keys == sorted(keys, reverse=True)


def test_colliding_float_keys_are_made_unique():
    # 0.7 + 2 steps and 0.701 + 1 step can land on the same float
    t1 = _tmpl("t1", "a")
    t2 = _tmpl("t2", "b")
    ranked = _aggregator([t1, t2], {"a": 0.701, "b": 0.7}).match([])
    keys = list(ranked)
    assert len(keys) == 2
    assert keys[0] != keys[1]


def test_match_is_deterministic():
    templates = [_tmpl(f"t{i}", f"e{i}") for i in range(10)]
    scores = {f"e{i}": 0.55 + (i % 3) * 0.1 for i in range(10)}
    agg = _aggregator(templates, scores)
    first, second = agg.match([]), agg.match([])
    assert list(first) == list(second)
    assert [e.template.id for e in first.entries] == [e.template.id for e in second.entries]
    assert dict(first) == dict(second)


def test_stable_order_uses_raw_score_then_position():
    # With offsets, 0.700 at position 5 outranks 0.703 at position 1
    templates = [_tmpl("t1", "a")] + [_tmpl(f"x{i}", f"x{i}") for i in range(3)] + [_tmpl("t5", "b")]
    scores = {"a": 0.703, "b": 0.700}
    offset_ids = [e.template.id for e in _aggregator(templates, scores).match([]).entries]
    stable_ids = [e.template.id for e in _aggregator(templates, scores, ranking_order="stable").match([]).entries]
    assert offset_ids == ["t5", "t1"]
    assert stable_ids == ["t1", "t5"]


def test_stable_order_iterates_entries_not_descending_keys():
    templates = [_tmpl("t1", "a")] + [_tmpl(f"x{i}", f"x{i}") for i in range(3)] + [_tmpl("t5", "b")]
    ranked = _aggregator(templates, {"a": 0.703, "b": 0.700}, ranking_order="stable").match([])
    keys = list(ranked)
    assert keys == [e.key for e in ranked.entries]
    assert keys[0] < keys[1]
    assert ranked.best().template.id == "t1"
    assert ranked[keys[0]] == list(ranked.entries[0].candidates)


def test_stable_order_ties_prefer_earlier_template():
    templates = [_tmpl("t1", "a"), _tmpl("t2", "b")]
    ranked = _aggregator(templates, {"a": 0.8, "b": 0.8}, ranking_order="stable").match([])
    assert [e.template.id for e in ranked.entries] == ["t1", "t2"]


def test_unknown_ranking_order_rejected():
    with pytest.raises(ConfigError):
        _aggregator([], {}, ranking_order="random")


def test_substitutor_errors_propagate():
    agg = _aggregator([_tmpl("t1", "a")], {"a": 0.9}, substitutor=FailingSubstitutor())
    with pytest.raises(RuntimeError):
        agg.match([])


def test_trace_records_ranking():
    tracer = TraceCollector()
    _aggregator([_tmpl("t1", "a"), _tmpl("t2", "b")], {"a": 0.9, "b": 0.1}).match([], tracer=tracer)
    assert tracer.steps("question_properties")[0]["start_word"] == "What"
    ranking = tracer.steps("ranking")[0]
    assert [r["template"] for r in ranking["ranked"]] == ["t1"]
