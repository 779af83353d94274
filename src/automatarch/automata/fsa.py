import copy
import sys

from loguru import logger

# Reserved label for spontaneous transitions. It is never part of an alphabet.
EPSILON = "ε"

DFA_KIND = "DFA"
NFA_KIND = "NFA"


def is_symbol(label):
    """
    Returns True if ``label`` can be an alphabet symbol: a one-character
    string other than :data:`EPSILON`.
    """
    return isinstance(label, str) and len(label) == 1 and label != EPSILON


# Exceptions


class AutomatonError(Exception):
    """
    Base class for errors raised by the automaton engine.

    Mutations never raise: they report failure by returning ``False``.
    Exceptions are reserved for transformations and deserialization that
    cannot produce a well-formed result.
    """


class MissingInitialStateError(AutomatonError):
    """
    Raised when a transformation (subset construction, minimization) is asked
    to work on an automaton that has no initial state.
    """

    def __init__(self, message="automaton has no initial state"):
        self.message = message
        super().__init__(message)


# Base class


class Automaton:
    """
    Finite state automaton with string-labelled states.

    This is the shared interface of :class:`DFA` and :class:`NFA`. The two
    subclasses differ only in the shape of their transition table: a DFA maps
    ``transitions[src][label]`` to a single destination state, an NFA maps it
    to a set of destination states and also accepts :data:`EPSILON` labels.

    Attributes:
        states (set): The states of the automaton.
        alphabet (set): The input symbols, never including :data:`EPSILON`.
        transitions (dict): Maps source states to a dictionary of labels and
            destinations.
        initial (str): The initial state, or None if it is not set.
        final_states (set): The accepting states.

    Every mutation method returns True when it changed the automaton and
    False when the request was rejected, for example because it referenced a
    state that does not exist. A rejected request leaves the automaton
    untouched.
    """

    kind = None

    def __init__(self):
        self.states = set()
        self.alphabet = set()
        self.transitions = {}
        self.initial = None
        self.final_states = set()

    def __len__(self):
        return len(self.states)

    def __eq__(self, other):
        """
        Check if two automata are structurally equal.

        Args:
            other (Automaton): The other automaton to compare with.

        Returns:
            bool: True if both automata have the same kind, states, alphabet,
            initial state, final states and transitions.
        """
        if not isinstance(other, Automaton):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.initial == other.initial
            and self.states == other.states
            and self.alphabet == other.alphabet
            and self.final_states == other.final_states
            and self.transitions == other.transitions
        )

    def __repr__(self):
        return (
            f"<{type(self).__name__} states={len(self.states)} "
            f"alphabet={sorted(self.alphabet)!r} initial={self.initial!r}>"
        )

    # States

    def add_state(self, state):
        """
        Adds a state to the automaton.

        Args:
            state (str): The name of the new state.

        Returns:
            bool: False if a state with this name already exists.
        """
        if state in self.states:
            return False
        self.states.add(state)
        return True

    def remove_state(self, state):
        """
        Removes a state and everything that refers to it.

        The state is dropped from the final states, unset as the initial
        state, and every transition into or out of it is deleted. Transition
        entries that become empty are pruned.

        Args:
            state (str): The state to remove.

        Returns:
            bool: False if the state does not exist.
        """
        if state not in self.states:
            logger.debug("Ignoring removal of unknown state {!r}", state)
            return False

        self.states.discard(state)
        self.final_states.discard(state)
        if self.initial == state:
            self.initial = None

        self.transitions.pop(state, None)
        for src in list(self.transitions):
            self._unlink(src, state)
            if not self.transitions[src]:
                del self.transitions[src]
        return True

    def set_initial_state(self, state):
        if state not in self.states:
            logger.debug("Ignoring unknown initial state {!r}", state)
            return False
        self.initial = state
        return True

    def toggle_final_state(self, state, is_final=None):
        """
        Marks or unmarks a state as final.

        Args:
            state (str): The state to change.
            is_final (bool, optional): The new membership. If omitted, the
                current membership is flipped.

        Returns:
            bool: False if the state does not exist.
        """
        if state not in self.states:
            logger.debug("Ignoring final flag on unknown state {!r}", state)
            return False
        if is_final is None:
            is_final = state not in self.final_states
        if is_final:
            self.final_states.add(state)
        else:
            self.final_states.discard(state)
        return True

    def is_final(self, state):
        return state in self.final_states

    # Alphabet

    def set_alphabet(self, symbols):
        """
        Replaces the alphabet.

        Only one-character strings are kept. :data:`EPSILON` is never stored
        in the alphabet, and symbols that are still used by a transition are
        kept so that every transition label remains a member.

        Args:
            symbols (iterable): The new input symbols.
        """
        alphabet = {sym for sym in symbols if is_symbol(sym)}
        in_use = self.all_labels() - alphabet
        in_use.discard(EPSILON)
        if in_use:
            logger.debug("Keeping symbols still used by transitions: {}", sorted(in_use))
        self.alphabet = alphabet | in_use

    def all_labels(self):
        """
        Returns the set of labels used by at least one transition, including
        :data:`EPSILON` when the automaton has spontaneous transitions.
        """
        labels = set()
        for trans in self.transitions.values():
            labels.update(trans)
        return labels

    # Transitions

    def add_transition(self, src, label, dest):
        """
        Adds a transition from a source state to a destination state.

        A label other than :data:`EPSILON` is added to the alphabet. Labels
        must be one-character strings, since input is read one character at
        a time.

        Args:
            src (str): The source state.
            label (str): The input symbol, or :data:`EPSILON`.
            dest (str): The destination state.

        Returns:
            bool: False if either state is unknown or the label is not allowed
            for this kind of automaton.
        """
        if src not in self.states or dest not in self.states:
            logger.debug(
                "Rejecting transition {!r} -{}-> {!r}: unknown state", src, label, dest
            )
            return False
        if label != EPSILON and not is_symbol(label):
            logger.debug("Rejecting label {!r}: not a one-character symbol", label)
            return False
        if not self._accepts_label(label):
            logger.debug("Rejecting label {!r} on a {}", label, self.kind)
            return False

        if label != EPSILON:
            self.alphabet.add(label)
        self._store(self.transitions.setdefault(src, {}), label, dest)
        return True

    def remove_transition(self, src, label, dest=None):
        """
        Removes a transition.

        If no transition left in the automaton uses the label, the label is
        removed from the alphabet too.

        Args:
            src (str): The source state.
            label (str): The label of the transition.
            dest (str, optional): The destination to remove. If omitted, every
                destination on this label is removed.

        Returns:
            bool: False if there is no such transition.
        """
        trans = self.transitions.get(src)
        if not trans or label not in trans:
            return False
        if not self._discard(trans, label, dest):
            return False
        if not trans:
            del self.transitions[src]

        if label != EPSILON and not any(
            label in t for t in self.transitions.values()
        ):
            self.alphabet.discard(label)
        return True

    def targets(self, src, label):
        """
        Returns the destinations of ``src`` on ``label`` as a frozenset, for
        either kind of automaton.
        """
        raise NotImplementedError

    def triples(self):
        """
        Generates every transition as a ``(source, label, destination)`` tuple.
        """
        for src, trans in self.transitions.items():
            for label in trans:
                for dest in self.targets(src, label):
                    yield src, label, dest

    def _accepts_label(self, label):
        raise NotImplementedError

    def _store(self, trans, label, dest):
        raise NotImplementedError

    def _discard(self, trans, label, dest):
        raise NotImplementedError

    def _unlink(self, src, state):
        raise NotImplementedError

    # Copies

    def clone(self):
        """
        Returns a fully independent copy of this automaton.
        """
        return copy.deepcopy(self)

    def normalize(self, prefix="q"):
        """
        Returns a copy of this automaton with its states renamed to
        ``q0, q1, ...``.

        The initial state gets the first name, then the final states, then
        the remaining states. Final and remaining states are numbered in
        sorted order so the result does not depend on set iteration order.

        Args:
            prefix (str, optional): Prefix of the new names. Defaults to "q".

        Returns:
            Automaton: A new automaton of the same kind.
        """
        order = []
        if self.initial is not None:
            order.append(self.initial)
        order.extend(sorted(self.final_states - {self.initial}))
        order.extend(sorted(self.states - self.final_states - {self.initial}))
        mapping = {state: f"{prefix}{i}" for i, state in enumerate(order)}
        return self.renamed(mapping)

    def renamed(self, mapping):
        """
        Returns a copy of this automaton with every state ``s`` renamed to
        ``mapping[s]``.

        Args:
            mapping (dict): Old name to new name, covering every state.
        """
        newfsa = type(self)()
        for state in self.states:
            newfsa.add_state(mapping[state])
        if self.initial is not None:
            newfsa.set_initial_state(mapping[self.initial])
        for state in self.final_states:
            newfsa.toggle_final_state(mapping[state], True)
        for src, label, dest in self.triples():
            newfsa.add_transition(mapping[src], label, mapping[dest])
        newfsa.set_alphabet(self.alphabet)
        return newfsa

    def dump(self, stream=sys.stdout):
        """
        Prints a textual representation of the automaton to the specified
        stream. The initial state is marked with ``@`` and final states with
        ``*``.

        Args:
            stream (file): The stream to print to. Defaults to sys.stdout.
        """
        print(self.kind, "alphabet:", ",".join(sorted(self.alphabet)), file=stream)
        for state in sorted(self.states):
            beg = "@" if state == self.initial else " "
            end = "*" if state in self.final_states else ""
            print(beg, f"{state}{end}", file=stream)
            trans = self.transitions.get(state, {})
            for label in sorted(trans):
                dests = ",".join(sorted(self.targets(state, label)))
                print("   ", label, "->", dests, file=stream)

    # Algorithms

    def simulate(self, string):
        from automatarch.automata.simulation import simulate

        return simulate(self, string)

    def simulate_step(self, string, step):
        from automatarch.automata.simulation import simulate_step

        return simulate_step(self, string, step)

    def to_dfa(self):
        from automatarch.automata.subset import nfa_to_dfa

        return nfa_to_dfa(self)

    def minimize(self):
        from automatarch.automata.minimize import minimize_dfa

        return minimize_dfa(self)

    def validate(self):
        from automatarch.automata.validation import validate

        return validate(self)

    def is_deterministic(self):
        from automatarch.automata.validation import is_deterministic

        return is_deterministic(self)

    def to_json(self):
        from automatarch.automata.serialize import to_json

        return to_json(self)

    @staticmethod
    def from_json(data):
        from automatarch.automata.serialize import from_json

        return from_json(data)


class DFA(Automaton):
    """
    Deterministic finite automaton.

    Each ``(state, label)`` pair has at most one destination, stored directly
    as ``transitions[src][label] = dest``. Spontaneous transitions are not
    allowed. Adding a transition for a pair that already has one replaces the
    old destination.
    """

    kind = DFA_KIND

    def next_state(self, src, label):
        """
        Returns the destination of ``src`` on ``label``, or None if there is
        no such transition.
        """
        trans = self.transitions.get(src)
        if trans is None:
            return None
        return trans.get(label)

    def targets(self, src, label):
        dest = self.next_state(src, label)
        return frozenset() if dest is None else frozenset((dest,))

    def _accepts_label(self, label):
        return label != EPSILON

    def _store(self, trans, label, dest):
        trans[label] = dest

    def _discard(self, trans, label, dest):
        if dest is not None and trans[label] != dest:
            return False
        del trans[label]
        return True

    def _unlink(self, src, state):
        trans = self.transitions[src]
        for label in [lb for lb, dest in trans.items() if dest == state]:
            del trans[label]


class NFA(Automaton):
    """
    Non-deterministic finite automaton.

    ``transitions[src][label]`` is a set of zero or more destinations, and
    :data:`EPSILON` may be used as a label. Sets that become empty are pruned
    so the table never holds empty entries.
    """

    kind = NFA_KIND

    def targets(self, src, label):
        trans = self.transitions.get(src)
        if trans is None or label not in trans:
            return frozenset()
        return frozenset(trans[label])

    def _accepts_label(self, label):
        return True

    def _store(self, trans, label, dest):
        trans.setdefault(label, set()).add(dest)

    def _discard(self, trans, label, dest):
        dests = trans[label]
        if dest is None:
            dests.clear()
        elif dest in dests:
            dests.discard(dest)
        else:
            return False
        if not dests:
            del trans[label]
        return True

    def _unlink(self, src, state):
        trans = self.transitions[src]
        for label in list(trans):
            trans[label].discard(state)
            if not trans[label]:
                del trans[label]


_kinds = {DFA_KIND: DFA, NFA_KIND: NFA}


def new_automaton(kind):
    """
    Creates an empty automaton of the given kind.

    Args:
        kind (str): Either "DFA" or "NFA".

    Raises:
        ValueError: If the kind is not known.
    """
    try:
        return _kinds[kind]()
    except (KeyError, TypeError):
        raise ValueError(f"Unknown automaton kind {kind!r}") from None
