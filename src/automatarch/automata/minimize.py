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

from automatarch.automata.closure import reachable_states
from automatarch.automata.fsa import DFA, DFA_KIND, MissingInitialStateError


def initial_partition(dfa):
    """
    Returns the starting partition of the reachable states: the final states
    and the non-final states, leaving out an empty block.
    """
    reachable = reachable_states(dfa)
    finals = frozenset(reachable & dfa.final_states)
    others = frozenset(reachable - finals)
    return tuple(block for block in (finals, others) if block)


def _block_index(blocks):
    index = {}
    for i, block in enumerate(blocks):
        for state in block:
            index[state] = i
    return index


def _split(dfa, block, index, labels):
    # Groups the members of the block by the block their transition on the
    # first distinguishing label lands in. None stands for "no transition"; a
    # state outside the partition is keyed by its own name.
    if len(block) < 2:
        return [block]
    for label in labels:
        groups = {}
        for state in sorted(block):
            dest = dfa.next_state(state, label)
            key = None if dest is None else index.get(dest, dest)
            groups.setdefault(key, set()).add(state)
        if len(groups) > 1:
            return [frozenset(group) for group in groups.values()]
    return [block]


def refine_partition(dfa, blocks):
    """
    Splits the blocks of a partition until no block can be split further.

    In each round every block is examined symbol by symbol; if its members'
    transitions on a symbol land in different blocks (or some members have
    no transition on it), the block is replaced by one block per
    destination. Each round builds a new tuple of blocks from the previous
    one. The loop stops at the first round that changes nothing.

    Args:
        dfa (DFA): The automaton the blocks belong to.
        blocks (tuple): A partition of (a subset of) the DFA's states.
            Transitions leaving the partition are grouped by their target
            state, so each outside state acts as its own singleton block.

    Returns:
        tuple: The refined partition, as a tuple of frozensets.
    """
    labels = sorted(dfa.alphabet)
    blocks = tuple(blocks)
    rounds = 0
    changed = True
    while changed:
        changed = False
        rounds += 1
        index = _block_index(blocks)
        new_blocks = []
        for block in blocks:
            parts = _split(dfa, block, index, labels)
            if len(parts) > 1:
                changed = True
            new_blocks.extend(parts)
        blocks = tuple(new_blocks)
    logger.debug("Partition refinement converged after {} rounds", rounds)
    return blocks


def partition_is_stable(dfa, blocks):
    """
    Returns True if, for every block and every symbol, all members of the
    block move into the same block (or all have no transition).

    This is the property the minimized DFA relies on when it takes the
    transitions of a single representative per block.
    """
    index = _block_index(blocks)
    for block in blocks:
        for label in dfa.alphabet:
            dests = set()
            for state in block:
                dest = dfa.next_state(state, label)
                dests.add(None if dest is None else index.get(dest, dest))
            if len(dests) > 1:
                return False
    return True


def minimize_dfa(fsa, prefix="q"):
    """
    Returns the minimal DFA accepting the same language as ``fsa``.

    An NFA is converted with the subset construction first. The minimizer
    then:

    1. Discards the states that are not reachable from the initial state.
    2. Partitions the rest into final and non-final states.
    3. Refines the partition until it is stable (:func:`refine_partition`).
    4. Builds one new state per block, named ``q0, q1, ...`` in block order.
       A block is initial if it contains the old initial state and final if
       it contains an old final state. Its transitions are those of its
       smallest member, mapped to the blocks they land in.

    Args:
        fsa (Automaton): The automaton to minimize. It is not modified.
        prefix (str, optional): Prefix of the new state names.

    Returns:
        DFA: The minimized automaton.

    Raises:
        MissingInitialStateError: If the automaton has no initial state.
    """
    if fsa.kind != DFA_KIND:
        fsa = fsa.to_dfa()
    if fsa.initial is None:
        raise MissingInitialStateError("cannot minimize a DFA without an initial state")

    blocks = refine_partition(fsa, initial_partition(fsa))

    mapping = {}
    for i, block in enumerate(blocks):
        for state in block:
            mapping[state] = f"{prefix}{i}"

    minimized = DFA()
    for i, block in enumerate(blocks):
        name = f"{prefix}{i}"
        minimized.add_state(name)
        if fsa.initial in block:
            minimized.set_initial_state(name)
        if block & fsa.final_states:
            minimized.toggle_final_state(name, True)

    for block in blocks:
        representative = min(block)
        for label in sorted(fsa.alphabet):
            dest = fsa.next_state(representative, label)
            if dest is not None:
                minimized.add_transition(mapping[representative], label, mapping[dest])

    minimized.set_alphabet(fsa.alphabet)
    logger.debug("Minimized DFA: {} states -> {} states", len(fsa), len(minimized))
    return minimized
