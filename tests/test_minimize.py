import pytest

from automatarch.automata.fsa import DFA, MissingInitialStateError
from automatarch.automata.minimize import (
    initial_partition,
    minimize_dfa,
    partition_is_stable,
    refine_partition,
)
from automatarch.automata.samples import sample_dfa, sample_nfa
from automatarch.automata.simulation import accepted_strings


def build_dfa(initial, finals, edges):
    dfa = DFA()
    for src, _, dest in edges:
        dfa.add_state(src)
        dfa.add_state(dest)
    dfa.add_state(initial)
    dfa.set_initial_state(initial)
    for state in finals:
        dfa.add_state(state)
        dfa.toggle_final_state(state, True)
    for src, label, dest in edges:
        dfa.add_transition(src, label, dest)
    return dfa


def ends_in_a():
    return build_dfa(
        "A",
        ["B"],
        [
            ("A", "a", "B"),
            ("A", "b", "C"),
            ("B", "a", "B"),
            ("B", "b", "D"),
            ("C", "a", "B"),
            ("C", "b", "C"),
            ("D", "a", "B"),
            ("D", "b", "C"),
        ],
    )


def twin_finals():
    return build_dfa(
        "s",
        ["f1", "f2"],
        [
            ("s", "a", "f1"),
            ("s", "b", "f2"),
            ("f1", "a", "f1"),
            ("f1", "b", "f1"),
            ("f2", "a", "f2"),
            ("f2", "b", "f2"),
        ],
    )


def mod3():
    # Binary numbers divisible by 3, with a duplicated copy of the machine
    edges = []
    for copy in ("", "'"):
        for r in range(3):
            for bit in (0, 1):
                edges.append((f"r{r}{copy}", str(bit), f"r{(2 * r + bit) % 3}"))
    dfa = build_dfa("r0'", ["r0", "r0'"], edges)
    return dfa


def same_language(a, b, length=6):
    return list(accepted_strings(a, length)) == list(accepted_strings(b, length))


def test_twin_finals_collapse():
    dfa = twin_finals()
    minimized = minimize_dfa(dfa)
    assert len(minimized) == 2
    assert len(minimized) < len(dfa)
    # Block 0 holds the final states, block 1 the start state
    assert minimized.initial == "q1"
    assert minimized.final_states == {"q0"}
    assert minimized.transitions == {
        "q0": {"a": "q0", "b": "q0"},
        "q1": {"a": "q0", "b": "q0"},
    }
    assert same_language(dfa, minimized)


def test_equivalent_non_finals_collapse():
    dfa = ends_in_a()
    minimized = dfa.minimize()
    assert len(minimized) == 2
    assert same_language(dfa, minimized)


def test_duplicated_machine():
    dfa = mod3()
    minimized = minimize_dfa(dfa)
    assert len(dfa) == 6
    assert len(minimized) == 3
    assert same_language(dfa, minimized, 7)


def test_already_minimal():
    dfa = sample_dfa()
    minimized = minimize_dfa(dfa)
    assert len(minimized) == 3
    assert minimized.alphabet == {"a", "b"}
    assert same_language(dfa, minimized)


def test_unreachable_states_dropped():
    dfa = sample_dfa()
    dfa.add_state("lost")
    dfa.toggle_final_state("lost", True)
    dfa.add_transition("lost", "a", "q0")
    minimized = minimize_dfa(dfa)
    assert len(minimized) == 3
    assert same_language(dfa, minimized)


def test_missing_transition_is_distinguishing():
    dfa = build_dfa(
        "p",
        ["f"],
        [("p", "a", "f"), ("p", "b", "r"), ("r", "b", "p")],
    )
    blocks = refine_partition(dfa, initial_partition(dfa))
    assert sorted(sorted(b) for b in blocks) == [["f"], ["p"], ["r"]]


def test_idempotent():
    for dfa in (sample_dfa(), ends_in_a(), twin_finals(), mod3()):
        once = minimize_dfa(dfa)
        twice = minimize_dfa(once)
        assert len(twice) == len(once)
        assert same_language(once, twice)


def test_partition_is_stable():
    for dfa in (sample_dfa(), ends_in_a(), twin_finals(), mod3()):
        start = initial_partition(dfa)
        blocks = refine_partition(dfa, start)
        assert partition_is_stable(dfa, blocks)
        members = [state for block in blocks for state in block]
        assert len(members) == len(set(members))


def test_unstable_partition_detected():
    dfa = sample_dfa()
    assert not partition_is_stable(dfa, initial_partition(dfa))


def test_partition_with_outside_targets():
    dfa = build_dfa("p", [], [("p", "a", "x"), ("q", "a", "x"), ("r", "a", "y")])

    together = (frozenset(["p", "q"]),)
    assert partition_is_stable(dfa, together)
    assert refine_partition(dfa, together) == together

    apart = (frozenset(["p", "r"]),)
    assert not partition_is_stable(dfa, apart)
    refined = refine_partition(dfa, apart)
    assert sorted(sorted(block) for block in refined) == [["p"], ["r"]]

    # Leaving the partition is not the same as having no transition
    dfa.add_state("s")
    mixed = (frozenset(["p", "s"]),)
    assert not partition_is_stable(dfa, mixed)
    assert len(refine_partition(dfa, mixed)) == 2


def test_initial_partition():
    dfa = sample_dfa()
    assert initial_partition(dfa) == (frozenset(["q2"]), frozenset(["q0", "q1"]))

    no_finals = sample_dfa()
    no_finals.toggle_final_state("q2", False)
    assert initial_partition(no_finals) == (frozenset(["q0", "q1", "q2"]),)


def test_nfa_is_converted_first():
    minimized = sample_nfa().minimize()
    assert minimized.kind == "DFA"
    assert len(minimized) == 2
    assert list(accepted_strings(minimized, 3)) == ["a"]


def test_requires_initial_state():
    dfa = DFA()
    dfa.add_state("q0")
    with pytest.raises(MissingInitialStateError):
        minimize_dfa(dfa)


def test_source_untouched():
    dfa = ends_in_a()
    before = dfa.clone()
    minimize_dfa(dfa)
    assert dfa == before
