import io

import pytest

from automatarch.automata.fsa import (
    DFA,
    EPSILON,
    NFA,
    new_automaton,
)
from automatarch.automata.samples import sample_dfa, sample_nfa


def make_nfa(*states):
    nfa = NFA()
    for state in states:
        nfa.add_state(state)
    return nfa


def test_new_automaton():
    assert isinstance(new_automaton("DFA"), DFA)
    assert isinstance(new_automaton("NFA"), NFA)
    with pytest.raises(ValueError):
        new_automaton("PDA")


def test_empty():
    fsa = DFA()
    assert len(fsa) == 0
    assert fsa.initial is None
    assert fsa.alphabet == set()
    assert fsa.transitions == {}


def test_add_state():
    fsa = DFA()
    assert fsa.add_state("q0")
    assert not fsa.add_state("q0")
    assert fsa.states == {"q0"}


def test_initial_and_final_need_members():
    fsa = DFA()
    fsa.add_state("q0")
    assert not fsa.set_initial_state("nope")
    assert fsa.initial is None
    assert fsa.set_initial_state("q0")
    assert fsa.initial == "q0"

    assert not fsa.toggle_final_state("nope", True)
    assert fsa.final_states == set()


def test_toggle_final_state():
    fsa = DFA()
    fsa.add_state("q0")
    assert fsa.toggle_final_state("q0")
    assert fsa.is_final("q0")
    assert fsa.toggle_final_state("q0")
    assert not fsa.is_final("q0")
    fsa.toggle_final_state("q0", True)
    fsa.toggle_final_state("q0", True)
    assert fsa.final_states == {"q0"}
    fsa.toggle_final_state("q0", False)
    assert fsa.final_states == set()


def test_add_transition_registers_symbol():
    nfa = make_nfa("q0", "q1")
    assert nfa.add_transition("q0", "a", "q1")
    assert nfa.add_transition("q0", EPSILON, "q1")
    assert nfa.alphabet == {"a"}
    assert nfa.transitions == {"q0": {"a": {"q1"}, EPSILON: {"q1"}}}


def test_add_transition_unknown_state():
    nfa = make_nfa("q0")
    assert not nfa.add_transition("q0", "a", "q9")
    assert not nfa.add_transition("q9", "a", "q0")
    assert nfa.transitions == {}
    assert nfa.alphabet == set()


def test_dfa_rejects_epsilon():
    dfa = DFA()
    dfa.add_state("q0")
    assert not dfa.add_transition("q0", EPSILON, "q0")
    assert not dfa.add_transition("q0", "", "q0")
    assert dfa.transitions == {}


def test_dfa_single_target():
    dfa = DFA()
    for s in ("q0", "q1", "q2"):
        dfa.add_state(s)
    dfa.add_transition("q0", "a", "q1")
    dfa.add_transition("q0", "a", "q2")
    assert dfa.transitions == {"q0": {"a": "q2"}}
    assert dfa.next_state("q0", "a") == "q2"
    assert dfa.next_state("q1", "a") is None
    assert dfa.targets("q0", "a") == frozenset(["q2"])


def test_nfa_multiple_targets():
    nfa = make_nfa("q0", "q1", "q2")
    nfa.add_transition("q0", "a", "q1")
    nfa.add_transition("q0", "a", "q2")
    assert nfa.targets("q0", "a") == frozenset(["q1", "q2"])
    assert nfa.targets("q1", "a") == frozenset()
    assert sorted(nfa.triples()) == [("q0", "a", "q1"), ("q0", "a", "q2")]


def test_remove_transition_prunes_alphabet():
    nfa = make_nfa("q0", "q1", "q2")
    nfa.add_transition("q0", "a", "q1")
    nfa.add_transition("q0", "a", "q2")
    nfa.add_transition("q1", "b", "q2")

    assert nfa.remove_transition("q0", "a", "q1")
    assert nfa.alphabet == {"a", "b"}
    assert nfa.remove_transition("q0", "a", "q2")
    assert "q0" not in nfa.transitions
    assert nfa.alphabet == {"b"}

    assert not nfa.remove_transition("q0", "a", "q2")
    assert not nfa.remove_transition("q1", "b", "q0")
    assert nfa.alphabet == {"b"}


def test_remove_transition_keeps_shared_symbol():
    dfa = sample_dfa()
    assert dfa.remove_transition("q0", "a")
    assert dfa.alphabet == {"a", "b"}
    assert dfa.next_state("q0", "a") is None


def test_remove_dfa_transition_checks_target():
    dfa = sample_dfa()
    assert not dfa.remove_transition("q0", "a", "q2")
    assert dfa.remove_transition("q0", "a", "q1")


def test_remove_epsilon_transition():
    nfa = sample_nfa()
    assert nfa.remove_transition("q0", EPSILON)
    assert nfa.alphabet == {"a"}
    assert "q0" not in nfa.transitions


def test_remove_state_cascades_dfa():
    dfa = sample_dfa()
    assert dfa.remove_state("q1")
    assert dfa.states == {"q0", "q2"}
    assert dfa.transitions == {"q0": {"b": "q0"}}
    assert dfa.initial == "q0"

    assert dfa.remove_state("q0")
    assert dfa.initial is None
    assert dfa.transitions == {}

    assert dfa.remove_state("q2")
    assert dfa.final_states == set()
    assert not dfa.remove_state("q2")


def test_remove_state_cascades_nfa():
    nfa = make_nfa("q0", "q1", "q2")
    nfa.add_transition("q0", "a", "q1")
    nfa.add_transition("q0", "a", "q2")
    nfa.add_transition("q0", "b", "q2")
    nfa.add_transition("q2", EPSILON, "q0")

    nfa.remove_state("q2")
    assert nfa.transitions == {"q0": {"a": {"q1"}}}


def test_set_alphabet():
    fsa = DFA()
    fsa.set_alphabet(["a", "b", EPSILON, ""])
    assert fsa.alphabet == {"a", "b"}
    fsa.set_alphabet("c")
    assert fsa.alphabet == {"c"}


def test_symbols_are_single_characters():
    fsa = DFA()
    fsa.set_alphabet(["a", "bc", 1, None])
    assert fsa.alphabet == {"a"}

    dfa = sample_dfa()
    assert not dfa.add_transition("q0", "ab", "q1")
    assert not dfa.add_transition("q0", 1, "q1")
    assert dfa.alphabet == {"a", "b"}
    assert dfa == sample_dfa()

    nfa = sample_nfa()
    assert not nfa.add_transition("q0", "aa", "q1")
    assert nfa.add_transition("q0", EPSILON, "q2")


def test_set_alphabet_keeps_used_symbols():
    dfa = sample_dfa()
    dfa.set_alphabet(["a", "c"])
    assert dfa.alphabet == {"a", "b", "c"}


def test_clone_is_independent():
    nfa = sample_nfa()
    copy = nfa.clone()
    assert copy == nfa
    assert copy is not nfa

    copy.add_transition("q1", "a", "q1")
    copy.toggle_final_state("q0", True)
    assert nfa.targets("q1", "a") == frozenset(["q2"])
    assert nfa.final_states == {"q2"}
    assert copy != nfa


def test_equality_includes_kind():
    dfa = DFA()
    nfa = NFA()
    assert dfa != nfa
    assert DFA() == DFA()


def test_normalize():
    dfa = DFA()
    for s in ("start", "x", "end", "mid"):
        dfa.add_state(s)
    dfa.set_initial_state("start")
    dfa.toggle_final_state("end", True)
    dfa.add_transition("start", "a", "mid")
    dfa.add_transition("mid", "b", "end")
    dfa.add_transition("x", "a", "x")

    norm = dfa.normalize()
    assert norm.kind == "DFA"
    assert norm.states == {"q0", "q1", "q2", "q3"}
    assert norm.initial == "q0"
    assert norm.final_states == {"q1"}
    # "mid" sorts before "x"
    assert norm.transitions == {
        "q0": {"a": "q2"},
        "q2": {"b": "q1"},
        "q3": {"a": "q3"},
    }
    assert norm.alphabet == {"a", "b"}
    # The original is untouched
    assert dfa.initial == "start"


def test_normalize_nfa_prefix():
    nfa = sample_nfa().normalize(prefix="s")
    assert nfa.states == {"s0", "s1", "s2"}
    assert nfa.initial == "s0"
    assert nfa.final_states == {"s1"}
    assert nfa.transitions == {"s0": {EPSILON: {"s2"}}, "s2": {"a": {"s1"}}}


def test_normalize_without_initial():
    nfa = make_nfa("b", "a")
    norm = nfa.normalize()
    assert norm.initial is None
    assert norm.states == {"q0", "q1"}


def test_dump():
    out = io.StringIO()
    sample_dfa().dump(out)
    text = out.getvalue()
    assert text.splitlines()[0] == "DFA alphabet: a,b"
    assert "@ q0" in text
    assert "q2*" in text
    assert "b -> q2" in text
