from automatarch.automata.closure import (
    EMPTY_SET_NAME,
    StateSet,
    epsilon_closure,
    move,
    reachable_states,
    set_name,
)
from automatarch.automata.fsa import (
    DFA,
    DFA_KIND,
    EPSILON,
    NFA,
    NFA_KIND,
    Automaton,
    AutomatonError,
    MissingInitialStateError,
    new_automaton,
)
from automatarch.automata.minimize import minimize_dfa
from automatarch.automata.serialize import FileFormatError, from_json, to_json
from automatarch.automata.simulation import (
    SimulationResult,
    SimulationState,
    simulate,
    simulate_step,
    trace,
)
from automatarch.automata.subset import nfa_to_dfa
from automatarch.automata.validation import ValidationResult, is_deterministic, validate
