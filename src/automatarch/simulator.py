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

from loguru import logger

from automatarch.automata.simulation import (
    MISSING_INITIAL_STATE,
    SimulationResult,
    simulate,
    simulate_step,
)


class Simulator:
    """
    Steps through a run of an automaton on one input, for an interactive
    replay.

    The simulator keeps its own copy of the automaton, the input and a step
    cursor. Each call to :meth:`perform_step` recomputes the snapshot for the
    cursor with :func:`~automatarch.automata.simulation.simulate_step` and
    then advances the cursor, so a viewer only needs to render the returned
    :class:`~automatarch.automata.simulation.SimulationState`. Timing is left
    to the caller: :meth:`run` yields the snapshots one by one and a
    scheduler can stop consuming it at any point.

    Example:
        >>> sim = Simulator(sample_dfa())
        >>> sim.set_input("ab")
        >>> [s.state for s in sim.run()]
        ['q0', 'q1', 'q2']
    """

    def __init__(self, automaton=None):
        self.automaton = None
        self.input = ""
        self.step = 0
        self.state = None
        if automaton is not None:
            self.set_automaton(automaton)

    def set_automaton(self, automaton):
        """
        Loads a copy of ``automaton`` and rewinds the run.
        """
        self.automaton = automaton.clone()
        self.reset()

    def set_input(self, string):
        self.input = string
        self.reset()

    def reset(self):
        self.step = 0
        self.state = None

    def perform_step(self):
        """
        Returns the snapshot at the cursor and moves the cursor forward,
        unless the run is complete or stopped by an error.

        Returns:
            SimulationState: The current snapshot, or None if no automaton is
            loaded.
        """
        if self.automaton is None:
            return None

        self.state = simulate_step(self.automaton, self.input, self.step)
        if not self.state.complete and not self.state.error:
            self.step += 1
        return self.state

    def run(self):
        """
        Rewinds and yields every snapshot of the run until it completes or
        fails.
        """
        self.reset()
        while self.automaton is not None:
            state = self.perform_step()
            yield state
            if state.complete or state.error:
                break

    def display_state(self):
        """
        Returns a summary of the current snapshot for display.

        Returns:
            dict: ``current_state`` (a state name, a ``{a, b}`` set for an
            NFA, or ``-``), ``remaining_input``, ``result`` ("Accepted",
            "Rejected" or "In progress"), ``complete`` and ``error``.
        """
        state = self.state
        if state is None:
            return {
                "current_state": "-",
                "remaining_input": self.input,
                "result": "-",
                "complete": False,
                "error": None,
            }

        if state.states is None:
            current = state.state if state.state is not None else "-"
        else:
            current = "{" + ", ".join(state.states) + "}"

        if state.complete:
            result = "Accepted" if state.accepted else "Rejected"
        else:
            result = "In progress"

        return {
            "current_state": current,
            "remaining_input": state.remaining_input,
            "result": result,
            "complete": state.complete,
            "error": state.message,
        }

    def last_transitions(self):
        """
        Returns the transitions taken by the most recent step as a list of
        ``(source, symbol, destination)`` tuples, so a viewer can highlight
        them. The list is empty before the first symbol and after an error.
        """
        state = self.state
        if state is None or state.step == 0 or state.error:
            return []

        symbol = self.input[state.step - 1]
        previous = simulate_step(self.automaton, self.input, state.step - 1)
        current = set(state.current)
        edges = []
        for src in previous.current:
            for dest in sorted(self.automaton.targets(src, symbol)):
                if dest in current:
                    edges.append((src, symbol, dest))
        return edges

    def test_string(self, string):
        """
        Runs the whole of ``string`` without touching the cursor.
        """
        if self.automaton is None:
            return SimulationResult(False, (), MISSING_INITIAL_STATE, "No automaton defined")
        return simulate(self.automaton, string)

    def is_deterministic(self):
        if self.automaton is None:
            return False
        return self.automaton.is_deterministic()

    def convert_to_dfa(self):
        if self.automaton is None:
            return None
        return self.automaton.to_dfa()

    def minimize_dfa(self):
        if self.automaton is None:
            return None
        minimized = self.automaton.minimize()
        logger.debug("Simulator produced {!r}", minimized)
        return minimized
