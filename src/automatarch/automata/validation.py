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

from automatarch.automata.fsa import DFA_KIND, EPSILON

# Finding kinds
MISSING_INITIAL_STATE = "MissingInitialState"
NO_FINAL_STATES = "NoFinalStates"
INCOMPLETE_DFA = "IncompleteDFA"


class Finding:
    """
    One problem reported by :func:`validate`.

    Attributes:
        kind (str): One of the finding kinds defined in this module.
        message (str): A human-readable description.
        state (str): The state concerned, if any.
        symbol (str): The symbol concerned, if any.
    """

    __slots__ = ("kind", "message", "state", "symbol")

    def __init__(self, kind, message, state=None, symbol=None):
        self.kind = kind
        self.message = message
        self.state = state
        self.symbol = symbol

    def __repr__(self):
        return f"<Finding {self.kind}: {self.message}>"

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, Finding):
            return NotImplemented
        return (self.kind, self.message, self.state, self.symbol) == (
            other.kind,
            other.message,
            other.state,
            other.symbol,
        )


class ValidationResult:
    __slots__ = ("findings",)

    def __init__(self, findings):
        self.findings = tuple(findings)

    def __repr__(self):
        return f"<ValidationResult valid={self.valid} findings={len(self.findings)}>"

    def __bool__(self):
        return self.valid

    @property
    def valid(self):
        return not self.findings

    @property
    def errors(self):
        """
        The messages of the findings, in the order they were found.
        """
        return [finding.message for finding in self.findings]

    def kinds(self):
        return {finding.kind for finding in self.findings}


def validate(fsa):
    """
    Checks an automaton for structural problems without stopping at the
    first one.

    Reports a missing initial state, the absence of final states, and, for a
    DFA only, every ``(state, symbol)`` pair of the full states x alphabet
    product that has no transition. An NFA does not need to be total.

    Args:
        fsa (Automaton): The automaton to check.

    Returns:
        ValidationResult: The findings; ``valid`` is True if there are none.
    """
    findings = []
    if fsa.initial is None:
        findings.append(Finding(MISSING_INITIAL_STATE, "Initial state is not set"))
    if not fsa.final_states:
        findings.append(Finding(NO_FINAL_STATES, "No final states defined"))

    if fsa.kind == DFA_KIND:
        for state in sorted(fsa.states):
            for symbol in sorted(fsa.alphabet):
                if fsa.next_state(state, symbol) is None:
                    findings.append(
                        Finding(
                            INCOMPLETE_DFA,
                            f"State {state} has no transition for symbol {symbol}",
                            state,
                            symbol,
                        )
                    )
    return ValidationResult(findings)


def is_deterministic(fsa):
    """
    Returns True if the automaton behaves deterministically, whatever its
    declared kind.

    An automaton with no states or an empty alphabet is deterministic. One
    with any epsilon transition is not. Otherwise it is deterministic unless
    some ``(state, symbol)`` pair has more than one destination. Missing
    transitions do not matter. The automaton's ``kind`` is not changed.
    """
    if not fsa.states or not fsa.alphabet:
        return True
    for src, trans in fsa.transitions.items():
        for label in trans:
            if label == EPSILON:
                return False
            if len(fsa.targets(src, label)) > 1:
                return False
    return True
