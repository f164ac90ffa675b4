import pytest

FASTQ_DATA = (
    b"@read1\n"
    b"ACGT\n"
    b"+\n"
    b"#I5+\n"
    b"@read2\n"
    b"ACG\n"
    b"+\n"
    b"III\n"
)

SAM_DATA = (
    b"@HD\tVN:1.6\tSO:unsorted\n"
    b"@SQ\tSN:chr1\tLN:100\n"
    b"read1\t0\tchr1\t1\t60\t4M\t*\t0\t0\tACGT\t#I5+\tNM:i:0\n"
    b"read2\t16\tchr1\t5\t60\t3M\t*\t0\t0\tACG\tIII\n"
    b"short\tline\n"
)


@pytest.fixture
def fastq_data():
    return FASTQ_DATA


@pytest.fixture
def sam_data():
    return SAM_DATA


@pytest.fixture
def fastq_file(tmp_path):
    path = tmp_path / "reads.fastq"
    path.write_bytes(FASTQ_DATA)
    return path


@pytest.fixture
def sam_file(tmp_path):
    path = tmp_path / "aln.sam"
    path.write_bytes(SAM_DATA)
    return path
