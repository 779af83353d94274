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

"""
Runs automata against input strings.

Simulation never raises for a rejected input. Problems met while reading the
input (a symbol outside the alphabet, a missing transition, an empty set of
active states) are reported in the ``error`` and ``message`` fields of the
returned objects, so a caller can display both the error and the partial
path that led to it.
"""

from collections import namedtuple

from automatarch.automata.closure import StateSet, epsilon_closure, move
from automatarch.automata.fsa import DFA_KIND

# Error kinds
UNKNOWN_SYMBOL = "UnknownSymbol"
MISSING_TRANSITION = "MissingTransition"
NO_REACHABLE_STATES = "NoReachableStates"
MISSING_INITIAL_STATE = "MissingInitialState"


_SimulationStateBase = namedtuple(
    "SimulationState",
    "state states step remaining_input accepted complete error message",
    defaults=(None, None),
)


class SimulationState(_SimulationStateBase):
    """
    A snapshot of one point in a run.

    Attributes:
        state (str): The current state of a DFA run, None for an NFA.
        states (tuple): The sorted active states of an NFA run, None for a
            DFA.
        step (int): The number of input symbols processed.
        remaining_input (str): The input not processed yet.
        accepted (bool): True if the current configuration is accepting.
        complete (bool): True if the run is over, because the whole input was
            read or because an error stopped it.
        error (str): One of the error kinds, or None.
        message (str): A human-readable description of the error, or None.

    Snapshots are immutable; assigning to a field raises ``AttributeError``.
    """

    __slots__ = ()

    def __repr__(self):
        current = self.state if self.states is None else self.states
        return (
            f"<SimulationState step={self.step} current={current!r} "
            f"remaining={self.remaining_input!r} accepted={self.accepted} "
            f"complete={self.complete} error={self.error}>"
        )

    @property
    def current(self):
        """
        The active states as a tuple, for either kind of automaton.
        """
        if self.states is not None:
            return self.states
        return () if self.state is None else (self.state,)


class SimulationResult:
    """
    The outcome of :func:`simulate`.

    Attributes:
        accepted (bool): True if the automaton accepts the whole input.
        path (tuple): The :class:`SimulationState` snapshots of the run, from
            the initial configuration up to the last one reached before an
            error, if any.
        error (str): The error kind that stopped the run, or None.
        message (str): A description of the error, or None.
    """

    __slots__ = ("accepted", "path", "error", "message")

    def __init__(self, accepted, path, error=None, message=None):
        self.accepted = accepted
        self.path = path
        self.error = error
        self.message = message

    def __repr__(self):
        return (
            f"<SimulationResult accepted={self.accepted} "
            f"steps={len(self.path)} error={self.error}>"
        )

    def __bool__(self):
        return self.accepted

    def states(self):
        """
        Returns the states visited, one item per path entry: a state name for
        a DFA run, a tuple of state names for an NFA run.
        """
        return [s.state if s.states is None else s.states for s in self.path]


def _snapshot(fsa, current, string, step, error=None, message=None):
    if fsa.kind == DFA_KIND:
        state = current.members[0] if current else None
        states = None
    else:
        state = None
        states = current.members
    accepted = error is None and current.intersects(fsa.final_states)
    complete = error is not None or step >= len(string)
    return SimulationState(
        state, states, step, string[step:], accepted, complete, error, message
    )


def trace(fsa, string):
    """
    Runs the automaton on ``string`` and yields a :class:`SimulationState`
    for every step, starting with the initial configuration (step 0).

    A DFA follows one transition per symbol. An NFA starts from the epsilon
    closure of its initial state and, for each symbol, moves and then takes
    the epsilon closure again. The generator stops after the snapshot of the
    last symbol, or after the first snapshot carrying an error.

    Args:
        fsa (Automaton): The automaton to run.
        string (str): The input.

    Yields:
        SimulationState: One snapshot per step.
    """
    if fsa.initial is None:
        yield SimulationState(
            None,
            None if fsa.kind == DFA_KIND else (),
            0,
            string,
            False,
            True,
            MISSING_INITIAL_STATE,
            "Initial state is not set",
        )
        return

    current = epsilon_closure(fsa, (fsa.initial,))
    yield _snapshot(fsa, current, string, 0)

    deterministic = fsa.kind == DFA_KIND
    for i, symbol in enumerate(string):
        if symbol not in fsa.alphabet:
            yield _snapshot(
                fsa,
                current,
                string,
                i + 1,
                UNKNOWN_SYMBOL,
                f"Symbol {symbol} is not in the alphabet",
            )
            return

        if deterministic:
            dest = fsa.next_state(current.members[0], symbol)
            if dest is None:
                yield _snapshot(
                    fsa,
                    current,
                    string,
                    i + 1,
                    MISSING_TRANSITION,
                    f"No transition from state {current.members[0]} on symbol {symbol}",
                )
                return
            current = StateSet((dest,))
        else:
            current = epsilon_closure(fsa, move(fsa, current, symbol))
            if not current:
                yield _snapshot(
                    fsa,
                    current,
                    string,
                    i + 1,
                    NO_REACHABLE_STATES,
                    f"No transitions from current states on symbol {symbol}",
                )
                return

        yield _snapshot(fsa, current, string, i + 1)


def simulate(fsa, string):
    """
    Tests whether the automaton accepts ``string``.

    Args:
        fsa (Automaton): The automaton to run.
        string (str): The input.

    Returns:
        SimulationResult: The acceptance verdict, the path of snapshots and
        the error that stopped the run, if any.

    Example:
        >>> result = simulate(sample_dfa(), "bab")
        >>> result.accepted, result.states()
        (True, ['q0', 'q0', 'q1', 'q2'])
    """
    path = []
    for snap in trace(fsa, string):
        if snap.error:
            return SimulationResult(False, tuple(path), snap.error, snap.message)
        path.append(snap)
    last = path[-1]
    return SimulationResult(last.complete and last.accepted, tuple(path))


def simulate_step(fsa, string, step):
    """
    Returns the snapshot of the run on ``string`` after ``step`` symbols.

    Nothing is remembered between calls: every call replays the run from the
    initial configuration, so the trace can be entered at any step, in any
    order. A step past the end of the input returns the final snapshot, and a
    step past an error returns the error snapshot.

    Args:
        fsa (Automaton): The automaton to run.
        string (str): The whole input.
        step (int): The number of symbols to process.

    Raises:
        ValueError: If ``step`` is negative.
    """
    if step < 0:
        raise ValueError(f"step must not be negative, got {step}")

    snap = None
    for snap in trace(fsa, string):
        if snap.step >= step:
            break
    return snap


def accepted_strings(fsa, max_length):
    """
    Generates the strings of at most ``max_length`` symbols that the
    automaton accepts, shortest first and in alphabetical order within each
    length.

    Args:
        fsa (Automaton): The automaton.
        max_length (int): The longest string to consider.

    Yields:
        str: The accepted strings.
    """
    if fsa.initial is None:
        return

    labels = sorted(fsa.alphabet)
    frontier = [("", epsilon_closure(fsa, (fsa.initial,)))]
    for length in range(max_length + 1):
        next_frontier = []
        for sofar, current in frontier:
            if current.intersects(fsa.final_states):
                yield sofar
            if length == max_length:
                continue
            for label in labels:
                dests = epsilon_closure(fsa, move(fsa, current, label))
                if dests:
                    next_frontier.append((sofar + label, dests))
        frontier = next_frontier
