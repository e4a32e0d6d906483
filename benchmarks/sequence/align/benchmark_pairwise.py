import pytest
import seqphylo.sequence.align as align


@pytest.mark.benchmark
@pytest.mark.parametrize("mode", ["global", "local"])
@pytest.mark.parametrize(
    "scheme",
    [align.ScoringScheme.nucleotide(), align.ScoringScheme.protein()],
    ids=["nucleotide", "protein"],
)
def benchmark_align_optimal(records, mode, scheme):
    """
    Align two sequences with 1000 symbols each.
    """
    align.align_optimal(records[0], records[-1], scheme, mode)


@pytest.mark.benchmark
def benchmark_dotplot(records):
    align.dotplot(records[0], records[-1])
