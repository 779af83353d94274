# Copyright 2007 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

from collections import deque

from loguru import logger

from automatarch.automata.closure import epsilon_closure, move
from automatarch.automata.fsa import DFA, DFA_KIND, EPSILON, MissingInitialStateError


def nfa_to_dfa(nfa):
    """
    Converts an NFA to an equivalent DFA using the subset construction.

    Every set of NFA states reachable from the epsilon closure of the initial
    state becomes one DFA state, named after its sorted members (see
    :func:`~automatarch.automata.closure.set_name`), so equal sets reached
    along different paths collapse into a single DFA state. A DFA state is
    final if its set contains a final NFA state. No dead state is created:
    when a set has no destination on a symbol, the DFA simply has no
    transition for it.

    Args:
        nfa (Automaton): The automaton to convert. A DFA is returned as a
            copy.

    Returns:
        DFA: A new automaton accepting the same language.

    Raises:
        MissingInitialStateError: If the automaton has no initial state.
    """
    if nfa.kind == DFA_KIND:
        return nfa.clone()
    if nfa.initial is None:
        raise MissingInitialStateError("cannot convert an NFA without an initial state")

    labels = sorted(label for label in nfa.alphabet if label != EPSILON)
    dfa = DFA()
    dfa.set_alphabet(labels)

    def register(stateset):
        dfa.add_state(stateset.name)
        if stateset.intersects(nfa.final_states):
            dfa.toggle_final_state(stateset.name, True)

    start = epsilon_closure(nfa, (nfa.initial,))
    register(start)
    dfa.set_initial_state(start.name)

    frontier = deque([start])
    while frontier:
        current = frontier.popleft()
        for label in labels:
            new_state = epsilon_closure(nfa, move(nfa, current, label))
            if not new_state:
                continue
            if new_state.name not in dfa.states:
                register(new_state)
                frontier.append(new_state)
            dfa.add_transition(current.name, label, new_state.name)

    logger.debug(
        "Subset construction: {} NFA states -> {} DFA states", len(nfa), len(dfa)
    )
    return dfa
