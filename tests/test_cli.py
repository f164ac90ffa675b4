"""
Tests for the command-line tools.
"""

import io
import sys

import pytest

import il8b
import mergeq
import pblock
import qsxtract


def _stdin(monkeypatch, data: bytes):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))


class TestIl8b:
    """Tests for the il8b tool."""

    def test_convert_to_file(self, fastq_file, tmp_path):
        """Test convert with -o."""
        out_path = tmp_path / "out.fastq"
        assert il8b.main(["convert", str(fastq_file), "-o", str(out_path)]) == 0
        assert out_path.read_bytes() == fastq_file.read_bytes().replace(b"#I5+", b"'I70")

    def test_convert_to_stdout(self, sam_file, sam_data, capsys):
        """Test convert without -o writes to stdout."""
        assert il8b.main(["convert", str(sam_file)]) == 0
        assert capsys.readouterr().out == sam_data.replace(b"#I5+", b"'I70").decode()

    def test_check_not_quantized(self, fastq_file, capsys):
        """Test that a raw file gets a negative verdict and exit status 0."""
        assert il8b.main(["check", str(fastq_file)]) == 0
        out = capsys.readouterr().out
        assert out == f"IL8B:NO - File {fastq_file} is NOT quantized with Illumina 8bin\n"

    def test_check_quantized(self, fastq_file, tmp_path, capsys):
        """Test the positive verdict after convert."""
        out_path = tmp_path / "q.fastq"
        il8b.main(["convert", str(fastq_file), "-o", str(out_path)])
        assert il8b.main(["check", str(out_path)]) == 0
        out = capsys.readouterr().out
        assert out == f"IL8B:YES - File {out_path} has been quantized with Illumina 8bin\n"

    def test_invalid_command(self, fastq_file):
        """Test that unknown subcommands fail."""
        assert il8b.main(["squash", str(fastq_file)]) == 1

    def test_invalid_option(self, fastq_file):
        """Test that unknown options fail."""
        assert il8b.main(["convert", str(fastq_file), "-x", "out"]) == 1

    def test_missing_arguments(self):
        """Test that too few arguments fail."""
        assert il8b.main(["convert"]) == 1

    def test_missing_input_leaves_no_output(self, tmp_path):
        """Test that an unopenable input fails before the output is created."""
        out_path = tmp_path / "out.fastq"
        assert il8b.main(["convert", str(tmp_path / "nope.fastq"), "-o", str(out_path)]) == 1
        assert not out_path.exists()

    def test_unopenable_output(self, fastq_file, tmp_path):
        """Test that an output in a missing directory fails."""
        out_path = tmp_path / "missing" / "out.fastq"
        assert il8b.main(["convert", str(fastq_file), "-o", str(out_path)]) == 1

    def test_truncated_fastq(self, tmp_path):
        """Test that a malformed FASTQ fails."""
        path = tmp_path / "bad.fastq"
        path.write_bytes(b"@r\nACGT\n+\n")
        assert il8b.main(["convert", str(path), "-o", str(tmp_path / "o.fastq")]) == 1


class TestPblock:
    """Tests for the pblock tool."""

    def test_compress(self, tmp_path, capsys):
        """Test P-Block output on stdout."""
        path = tmp_path / "reads.fastq"
        path.write_bytes(b"@r\nACGTA\n+\n+,5-.\n")
        assert pblock.main([str(path), "4"]) == 0
        # [10, 11, 20, 12, 13] -> [10, 10, 20, 12, 12]
        assert capsys.readouterr().out == "@r\nACGTA\n+\n++5--\n"

    def test_negative_two_p(self, fastq_file):
        """Test that two_p must be non-negative."""
        assert pblock.main([str(fastq_file), "-1"]) == 1

    def test_huge_two_p(self, tmp_path, capsys):
        """Test that a threshold beyond any quality spread collapses each read to one block."""
        path = tmp_path / "reads.fastq"
        path.write_bytes(b"@r\nACGTA\n+\n+,5-.\n")
        assert pblock.main([str(path), str(10 ** 30)]) == 0
        # min 10, max 20 -> 15
        assert capsys.readouterr().out == "@r\nACGTA\n+\n00000\n"

    def test_non_integer_two_p(self, fastq_file):
        """Test that two_p must be an integer."""
        assert pblock.main([str(fastq_file), "four"]) == 1

    def test_missing_input(self, tmp_path):
        """Test that a missing input fails."""
        assert pblock.main([str(tmp_path / "nope.sam"), "2"]) == 1


class TestQsxtractAndMergeq:
    """Tests for the extract and merge tools."""

    def test_extract_to_file(self, sam_file, tmp_path):
        """Test extraction from SAM with -o."""
        out_path = tmp_path / "quals.txt"
        assert qsxtract.main([str(sam_file), "-o", str(out_path)]) == 0
        assert out_path.read_bytes() == b"#I5+\nIII\n"

    def test_extract_from_stdin(self, fastq_data, monkeypatch, capsys):
        """Test that '-' reads FASTQ from stdin."""
        _stdin(monkeypatch, fastq_data)
        assert qsxtract.main(["-"]) == 0
        assert capsys.readouterr().out == "#I5+\nIII\n"

    @pytest.mark.parametrize("name", ["fastq_file", "sam_file"])
    def test_merge_round_trip(self, name, request, tmp_path, monkeypatch, capsys):
        """Test that mergeq undoes qsxtract."""
        path = request.getfixturevalue(name)
        quals_path = tmp_path / "quals.txt"
        assert qsxtract.main([str(path), "-o", str(quals_path)]) == 0

        _stdin(monkeypatch, quals_path.read_bytes())
        assert mergeq.main([str(path)]) == 0
        assert capsys.readouterr().out == path.read_bytes().decode()

    def test_merge_short_stdin(self, fastq_file, monkeypatch):
        """Test that too few quality lines fail."""
        _stdin(monkeypatch, b"IIII\n")
        assert mergeq.main([str(fastq_file)]) == 1

    def test_merge_rejects_stdin_input(self, monkeypatch):
        """Test that the primary input cannot be stdin."""
        _stdin(monkeypatch, b"")
        assert mergeq.main(["-"]) == 1
