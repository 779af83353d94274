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
Canonical JSON form of automata.

The document is a mapping with the keys ``kind``, ``states``, ``alphabet``,
``initialState``, ``finalStates`` and ``transitions``. The lists are sorted,
and ``transitions`` maps a source state to a mapping from symbol to the
destination (DFA) or to a sorted list of destinations (NFA)::

    {
        "kind": "DFA",
        "states": ["q0", "q1"],
        "alphabet": ["a"],
        "initialState": "q0",
        "finalStates": ["q1"],
        "transitions": {"q0": {"a": "q1"}}
    }

Documents written by older versions use the key ``type`` instead of
``kind``; both are read.
"""

import json

from loguru import logger

from automatarch.automata.fsa import (
    DFA_KIND,
    EPSILON,
    AutomatonError,
    new_automaton,
)


class FileFormatError(AutomatonError):
    """
    Raised when a document does not describe a well-formed automaton.
    """

    def __init__(self, message):
        self.message = message
        super().__init__(message)


def to_json(fsa):
    """
    Returns the canonical JSON-compatible dictionary describing ``fsa``.
    """
    deterministic = fsa.kind == DFA_KIND
    transitions = {}
    for src in sorted(fsa.transitions):
        trans = fsa.transitions[src]
        row = {}
        for label in sorted(trans):
            if deterministic:
                row[label] = trans[label]
            else:
                row[label] = sorted(trans[label])
        transitions[src] = row

    return {
        "kind": fsa.kind,
        "states": sorted(fsa.states),
        "alphabet": sorted(fsa.alphabet),
        "initialState": fsa.initial,
        "finalStates": sorted(fsa.final_states),
        "transitions": transitions,
    }


def _require(data, key, types):
    if key not in data:
        raise FileFormatError(f"Missing key {key!r}")
    value = data[key]
    if not isinstance(value, types):
        raise FileFormatError(f"Key {key!r} has the wrong type: {type(value).__name__}")
    return value


def from_json(data):
    """
    Rebuilds an automaton from the dictionary produced by :func:`to_json`.

    Args:
        data (dict): The document.

    Returns:
        Automaton: A new DFA or NFA.

    Raises:
        FileFormatError: If the document is missing keys, names an unknown
            kind, refers to states it does not declare, or uses a
            destination shape that does not match its kind.
    """
    if not isinstance(data, dict):
        raise FileFormatError("Automaton document must be a JSON object")

    kind = data.get("kind", data.get("type"))
    try:
        fsa = new_automaton(kind)
    except ValueError as e:
        raise FileFormatError(str(e)) from e

    for state in _require(data, "states", list):
        if not isinstance(state, str) or not fsa.add_state(state):
            raise FileFormatError(f"Invalid or duplicate state {state!r}")

    initial = data.get("initialState")
    if initial is not None and not (
        isinstance(initial, str) and fsa.set_initial_state(initial)
    ):
        raise FileFormatError(f"Initial state {initial!r} is not a declared state")

    for state in _require(data, "finalStates", list):
        if not (isinstance(state, str) and fsa.toggle_final_state(state, True)):
            raise FileFormatError(f"Final state {state!r} is not a declared state")

    deterministic = fsa.kind == DFA_KIND
    for src, row in _require(data, "transitions", dict).items():
        if not isinstance(row, dict):
            raise FileFormatError(f"Transitions of {src!r} must be an object")
        for label, dests in row.items():
            if deterministic:
                if not isinstance(dests, str):
                    raise FileFormatError(
                        f"DFA transition {src!r} -{label}-> must have one target"
                    )
                dests = [dests]
            elif not isinstance(dests, list):
                raise FileFormatError(
                    f"NFA transition {src!r} -{label}-> must have a list of targets"
                )
            for dest in dests:
                if not (
                    isinstance(dest, str) and fsa.add_transition(src, label, dest)
                ):
                    raise FileFormatError(
                        f"Invalid transition {src!r} -{label}-> {dest!r}"
                    )

    # The declared alphabet may contain symbols no transition uses.
    alphabet = _require(data, "alphabet", list)
    for symbol in alphabet:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise FileFormatError(f"Invalid alphabet symbol {symbol!r}")
    fsa.set_alphabet(alphabet)
    if EPSILON in alphabet:
        logger.debug("Dropped {} from a stored alphabet", EPSILON)

    logger.debug("Loaded {!r}", fsa)
    return fsa


def dumps(fsa, indent=2):
    return json.dumps(to_json(fsa), indent=indent, ensure_ascii=False)


def loads(text):
    try:
        data = json.loads(text)
    except ValueError as e:
        raise FileFormatError(f"Not a JSON document: {e}") from e
    return from_json(data)


def dump(fsa, stream, indent=2):
    """
    Writes the JSON form of ``fsa`` to a text stream.
    """
    stream.write(dumps(fsa, indent=indent))


def load(stream):
    """
    Reads an automaton from a text stream containing its JSON form.
    """
    return loads(stream.read())
