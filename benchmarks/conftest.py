import numpy as np
import pytest
from seqphylo.sequence import SequenceRecord


@pytest.fixture(scope="session")
def records():
    """
    Related random nucleotide sequences, where each sequence is derived
    from the previous one by point mutations.
    """
    N_SEQUENCES = 50
    LENGTH = 1000
    MUTATION_RATE = 0.05

    rng = np.random.default_rng(0)
    bases = np.array(list("ACGT"))
    sequence = rng.choice(bases, size=LENGTH)
    records = []
    for i in range(N_SEQUENCES):
        mutated = rng.random(LENGTH) < MUTATION_RATE
        sequence = sequence.copy()
        sequence[mutated] = rng.choice(bases, size=np.count_nonzero(mutated))
        records.append(SequenceRecord(f"seq{i}", "".join(sequence)))
    return records
