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

from cached_property import cached_property

from automatarch.automata.fsa import EPSILON

# Canonical name of the empty set of states
EMPTY_SET_NAME = "Ø"


def set_name(states):
    """
    Returns the canonical name of a set of states: the sorted member names
    joined by commas inside braces, or ``Ø`` for the empty set.
    """
    members = sorted(states)
    if not members:
        return EMPTY_SET_NAME
    return "{" + ",".join(members) + "}"


class StateSet:
    """
    An immutable, sorted set of state names.

    Subset construction uses these as the identities of DFA states: two
    StateSets are equal exactly when they have the same members, no matter
    which path produced them, and :attr:`name` gives the canonical string
    used as the new DFA state's label.
    """

    def __init__(self, states=()):
        self.members = tuple(sorted(set(states)))

    def __repr__(self):
        return f"StateSet({self.name})"

    def __iter__(self):
        return iter(self.members)

    def __len__(self):
        return len(self.members)

    def __bool__(self):
        return bool(self.members)

    def __contains__(self, state):
        return state in self.members

    def __eq__(self, other):
        if isinstance(other, StateSet):
            return self.members == other.members
        return NotImplemented

    def __hash__(self):
        return hash(self.members)

    @cached_property
    def name(self):
        return set_name(self.members)

    def intersects(self, states):
        return any(state in states for state in self.members)


def epsilon_closure(fsa, states):
    """
    Expands a set of states by following epsilon transitions until no new
    state is found.

    Args:
        fsa (Automaton): The automaton whose transitions are followed.
        states (iterable): The starting states.

    Returns:
        StateSet: The starting states plus every state reachable from them
        through epsilon transitions only.

    Example:
        >>> nfa = NFA()
        >>> for s in ("q0", "q1", "q2"):
        ...     _ = nfa.add_state(s)
        >>> nfa.add_transition("q0", EPSILON, "q1")
        True
        >>> epsilon_closure(nfa, ["q0"]).name
        '{q0,q1}'
    """
    closure = set(states)
    stack = list(closure)
    while stack:
        state = stack.pop()
        for dest in fsa.targets(state, EPSILON):
            if dest not in closure:
                closure.add(dest)
                stack.append(dest)
    return StateSet(closure)


def move(fsa, states, label):
    """
    Returns the union of the destinations of ``states`` on ``label``, without
    following epsilon transitions. Moving on :data:`EPSILON` itself yields the
    empty set.
    """
    if label == EPSILON:
        return StateSet()
    dests = set()
    for state in states:
        dests.update(fsa.targets(state, label))
    return StateSet(dests)


def reachable_states(fsa, start=None):
    """
    Returns the set of states that can be reached from ``start`` (the initial
    state by default), following transitions on any label.

    The result includes the start state itself. It is empty when there is no
    start state.
    """
    start = fsa.initial if start is None else start
    if start is None:
        return set()

    transitions = fsa.transitions
    reached = {start}
    queue = deque([start])
    while queue:
        src = queue.popleft()
        for label in transitions.get(src, ()):
            for dest in fsa.targets(src, label):
                if dest not in reached:
                    reached.add(dest)
                    queue.append(dest)
    return reached
