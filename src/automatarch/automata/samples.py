from automatarch.automata.fsa import DFA, EPSILON, NFA


def sample_dfa():
    """
    Returns the editor's starting automaton: a DFA over ``{a, b}`` accepting
    ``b*a+b``.

    States ``q0, q1, q2``, initial ``q0``, final ``q2``, transitions
    ``q0-a->q1, q0-b->q0, q1-a->q1, q1-b->q2``. ``q2`` has no outgoing
    transitions.
    """
    dfa = DFA()
    for state in ("q0", "q1", "q2"):
        dfa.add_state(state)
    dfa.set_initial_state("q0")
    dfa.toggle_final_state("q2", True)
    dfa.set_alphabet(["a", "b"])
    dfa.add_transition("q0", "a", "q1")
    dfa.add_transition("q0", "b", "q0")
    dfa.add_transition("q1", "a", "q1")
    dfa.add_transition("q1", "b", "q2")
    return dfa


def sample_nfa():
    """
    Returns a small NFA with a spontaneous transition: ``q0-ε->q1``,
    ``q1-a->q2``, initial ``q0``, final ``q2``. It accepts exactly ``a``.
    """
    nfa = NFA()
    for state in ("q0", "q1", "q2"):
        nfa.add_state(state)
    nfa.set_initial_state("q0")
    nfa.toggle_final_state("q2", True)
    nfa.add_transition("q0", EPSILON, "q1")
    nfa.add_transition("q1", "a", "q2")
    return nfa
