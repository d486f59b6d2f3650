from kbqa.contracts.models import QueryTemplate, Token
from kbqa.substitution.parameter_substitutor import DefaultParameterSubstitutor, placeholder_slots

BERLIN = Token("Berlin", kind="resource", uri="http://dbpedia.org/resource/Berlin")
GERMANY = Token("Germany", kind="resource", uri="http://dbpedia.org/resource/Germany")
CAPITAL = Token("capital", kind="ontology", uri="http://dbpedia.org/ontology/capital")


def _tmpl(*bodies):
    return QueryTemplate(
        id="t", start_words=frozenset({"Is"}), superlative=False,
        examples=("Is X the capital of X",), query_bodies=tuple(bodies),
    )


def test_placeholder_slots():
    assert placeholder_slots("ASK { {r0} {o0} {r1} }") == {"r": 2, "o": 1}
    assert placeholder_slots("SELECT * WHERE { ?s ?p ?o }") == {"r": 0, "o": 0}


def test_single_resource_binding():
    out = DefaultParameterSubstitutor().bind([Token("What"), BERLIN], "ex", _tmpl("SELECT ?x WHERE { {r0} ?p ?x }"))
    assert len(out) == 1
    assert out[0].query == "SELECT ?x WHERE { <http://dbpedia.org/resource/Berlin> ?p ?x }"
    assert out[0].bindings == {"r0": "http://dbpedia.org/resource/Berlin"}
    assert out[0].example == "ex"


def test_two_resources_give_both_orientations_in_token_order():
    out = DefaultParameterSubstitutor().bind([BERLIN, CAPITAL, GERMANY], "ex", _tmpl("ASK { {r0} {o0} {r1} }"))
    assert [q.bindings["r0"] for q in out] == [BERLIN.uri, GERMANY.uri]
    assert out[1].query == (
        "ASK { <http://dbpedia.org/resource/Germany> <http://dbpedia.org/ontology/capital> "
        "<http://dbpedia.org/resource/Berlin> }"
    )


def test_body_needing_more_entities_yields_nothing():
    sub = DefaultParameterSubstitutor()
    assert sub.bind([BERLIN], "ex", _tmpl("ASK { {r0} {o0} {r1} }")) == []


def test_unbindable_body_skipped_but_others_kept():
    out = DefaultParameterSubstitutor().bind([BERLIN], "ex", _tmpl("ASK { {r0} {o0} ?x }", "SELECT ?x WHERE { {r0} ?p ?x }"))
    assert [q.body for q in out] == ["SELECT ?x WHERE { {r0} ?p ?x }"]


def test_body_without_placeholders_renders_as_is():
    out = DefaultParameterSubstitutor().bind([], "ex", _tmpl("SELECT ?s WHERE { ?s ?p ?o } LIMIT 1"))
    assert [q.query for q in out] == ["SELECT ?s WHERE { ?s ?p ?o } LIMIT 1"]


def test_duplicate_mentions_bound_once_and_max_bindings_caps_output():
    tokens = [BERLIN, BERLIN, GERMANY, Token("Paris", kind="resource", uri="http://x/Paris")]
    out = DefaultParameterSubstitutor(max_bindings=4).bind(tokens, "ex", _tmpl("ASK { {r0} ?p {r1} }"))
    assert len(out) == 4
    assert len({q.query for q in out}) == 4


def test_prebracketed_uri_not_double_wrapped():
    tok = Token("Berlin", kind="resource", uri="<http://x/Berlin>")
    out = DefaultParameterSubstitutor().bind([tok], "ex", _tmpl("SELECT ?x WHERE { {r0} ?p ?x }"))
    assert out[0].query == "SELECT ?x WHERE { <http://x/Berlin> ?p ?x }"


def test_zero_padded_placeholder_binds_same_slot():
    out = DefaultParameterSubstitutor().bind([BERLIN, GERMANY], "ex", _tmpl("ASK { {r0} ?p {r01} }"))
    assert [q.query for q in out] == [
        "ASK { <http://dbpedia.org/resource/Berlin> ?p <http://dbpedia.org/resource/Germany> }",
        "ASK { <http://dbpedia.org/resource/Germany> ?p <http://dbpedia.org/resource/Berlin> }",
    ]
