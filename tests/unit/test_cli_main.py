"""
Unit tests for the CLI.

Tests the command group, global options, and the root, show, proof and
verify commands end to end through click's test runner.
"""

import json

import pytest
from click.testing import CliRunner

from merklet.cli.main import cli

SHA256_A = "559aead08264d5795d3909718cdd05abd49572e84fe55590eef31a88a08fdffd"
SHA256_ROOT_AB = "63956f0ce48edc48a0d528cb0b5d58e4d625afb14d63ca1bb9950eb657d61f40"
SHA256_ROOT_ABC = "420940ee1c7a73de80cfa2554efb4e6cec7ea745fed73108ccb06886054df8c6"
SHA3_256_A = "1c9ebd6caf02840a5b2b7f0fc870ec1db154886ae9fe621b822b14fd0bf513d6"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, sample_config_path):
    """Invoke the CLI with the sample configuration."""
    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--config", str(sample_config_path), *args], **kwargs)
    return _invoke


@pytest.mark.usefixtures("clean_logging")
class TestCLIMain:
    """Test CLI main entry point."""

    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'Merklet' in result.output
        assert '--config' in result.output
        assert '--log-level' in result.output
        assert '--verbose' in result.output
        for command in ('root', 'show', 'proof', 'verify'):
            assert command in result.output

    def test_cli_version(self, runner):
        """Test CLI version output."""
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_missing_config_uses_defaults(self, runner, missing_config_path, abc_leaf_file):
        """Test a nonexistent config file falls back to defaults."""
        result = runner.invoke(
            cli, ['--config', str(missing_config_path), 'root', str(abc_leaf_file)]
        )

        assert result.exit_code == 0
        assert SHA256_ROOT_ABC in result.output

    def test_invalid_config(self, runner, temp_dir, abc_leaf_file):
        """Test an invalid config file exits with an error."""
        config_path = temp_dir / "bad.yaml"
        config_path.write_text("hashing:\n  algorithm: md5\n")

        result = runner.invoke(cli, ['--config', str(config_path), 'root', str(abc_leaf_file)])

        assert result.exit_code == 1
        assert 'Invalid configuration' in result.output

    def test_config_selects_algorithm(self, runner, temp_dir, make_leaf_file):
        """Test the configured algorithm is used when no option is given."""
        config_path = temp_dir / "sha3.yaml"
        config_path.write_text(
            f"hashing:\n  algorithm: sha3_256\nlogging:\n  file: {temp_dir / 'merklet.log'}\n"
        )

        result = runner.invoke(
            cli, ['--config', str(config_path), 'root', str(make_leaf_file(["A"]))]
        )

        assert result.exit_code == 0
        assert SHA3_256_A in result.output


@pytest.mark.usefixtures("clean_logging")
class TestRootCommand:
    """Test the root command."""

    def test_root(self, invoke, abc_leaf_file):
        """Test the root of A, B, C."""
        result = invoke('root', str(abc_leaf_file))

        assert result.exit_code == 0
        assert SHA256_ROOT_ABC in result.output

    def test_single_leaf_root_is_leaf_digest(self, invoke, make_leaf_file):
        """Test a one-line file's root is the digest of that line."""
        result = invoke('root', str(make_leaf_file(["A"])))

        assert result.exit_code == 0
        assert SHA256_A in result.output

    def test_root_from_stdin(self, invoke):
        """Test "-" reads leaves from stdin."""
        result = invoke('root', '-', input="A\nB\n")

        assert result.exit_code == 0
        assert SHA256_ROOT_AB in result.output

    def test_root_json_format(self, invoke, temp_dir):
        """Test JSON array input."""
        path = temp_dir / "leaves.json"
        path.write_text(json.dumps(["A", "B", "C"]))

        result = invoke('root', '--format', 'json', str(path))

        assert result.exit_code == 0
        assert SHA256_ROOT_ABC in result.output

    def test_root_algorithm_option(self, invoke, make_leaf_file):
        """Test --algorithm overrides the configured hash."""
        result = invoke('root', '--algorithm', 'sha3_256', str(make_leaf_file(["A"])))

        assert result.exit_code == 0
        assert SHA3_256_A in result.output

    def test_root_openssl_backend(self, invoke, abc_leaf_file):
        """Test the OpenSSL backend yields the same root."""
        result = invoke('root', '--backend', 'openssl', str(abc_leaf_file))

        assert result.exit_code == 0
        assert SHA256_ROOT_ABC in result.output

    def test_root_verbose(self, runner, sample_config_path, abc_leaf_file):
        """Test --verbose reports leaf count and depth."""
        result = runner.invoke(
            cli, ['--config', str(sample_config_path), '--verbose', 'root', str(abc_leaf_file)]
        )

        assert result.exit_code == 0
        assert 'Leaves: 3' in result.output
        assert 'Depth: 3' in result.output

    def test_root_empty_file(self, invoke, make_leaf_file):
        """Test an empty leaf file is an error."""
        result = invoke('root', str(make_leaf_file([])))

        assert result.exit_code == 1
        assert 'Error:' in result.output
        assert 'empty' in result.output

    def test_root_missing_file(self, invoke, temp_dir):
        """Test a missing leaf file is an error."""
        result = invoke('root', str(temp_dir / "nope.txt"))

        assert result.exit_code == 1
        assert 'Error:' in result.output


@pytest.mark.usefixtures("clean_logging")
class TestShowCommand:
    """Test the show command."""

    def test_show_marks_duplication(self, invoke, abc_leaf_file):
        """Test the rendered tree marks the self-paired branch."""
        result = invoke('show', str(abc_leaf_file))

        assert result.exit_code == 0
        assert result.output.startswith(f"branch {SHA256_ROOT_ABC[:12]}")
        assert '(duplicated)' in result.output
        assert "'C'" in result.output

    def test_show_digest_chars(self, invoke, make_leaf_file):
        """Test --digest-chars controls digest width."""
        result = invoke('show', '-d', '6', str(make_leaf_file(["A"])))

        assert result.exit_code == 0
        assert result.output.strip() == f"leaf {SHA256_A[:6]} 'A'"


@pytest.mark.usefixtures("clean_logging")
class TestProofCommands:
    """Test the proof and verify commands."""

    def write_proof(self, invoke, leaf_file, index, proof_path):
        result = invoke('proof', '--index', str(index), '--output', str(proof_path), str(leaf_file))
        assert result.exit_code == 0
        return json.loads(proof_path.read_text())

    def test_proof_json(self, invoke, abc_leaf_file, temp_dir):
        """Test the proof file carries digests, directions and hash metadata."""
        data = self.write_proof(invoke, abc_leaf_file, 2, temp_dir / "proof.json")

        assert data["index"] == 2
        assert data["root"] == SHA256_ROOT_ABC
        assert data["algorithm"] == "sha256"
        assert data["backend"] == "hashlib"
        assert [s["direction"] for s in data["siblings"]] == ["right", "left"]
        assert data["siblings"][1]["digest"] == SHA256_ROOT_AB

    def test_proof_then_verify(self, invoke, abc_leaf_file, temp_dir):
        """Test a generated proof verifies."""
        proof_path = temp_dir / "proof.json"
        self.write_proof(invoke, abc_leaf_file, 1, proof_path)

        result = invoke('verify', str(proof_path))

        assert result.exit_code == 0
        assert 'Proof valid for leaf 1' in result.output

    def test_verify_against_trusted_root(self, invoke, abc_leaf_file, temp_dir):
        """Test --root checks against a supplied root."""
        proof_path = temp_dir / "proof.json"
        self.write_proof(invoke, abc_leaf_file, 0, proof_path)

        assert invoke('verify', '--root', SHA256_ROOT_ABC, str(proof_path)).exit_code == 0

        result = invoke('verify', '--root', SHA256_ROOT_AB, str(proof_path))
        assert result.exit_code == 1
        assert 'Proof invalid for leaf 0' in result.output

    def test_verify_tampered_proof(self, invoke, abc_leaf_file, temp_dir):
        """Test a tampered sibling fails verification."""
        proof_path = temp_dir / "proof.json"
        data = self.write_proof(invoke, abc_leaf_file, 0, proof_path)
        data["siblings"][0]["digest"] = "00" * 32
        proof_path.write_text(json.dumps(data))

        result = invoke('verify', str(proof_path))

        assert result.exit_code == 1
        assert 'Proof invalid' in result.output

    def test_verify_malformed_proof(self, invoke, temp_dir):
        """Test a proof file missing fields is rejected."""
        proof_path = temp_dir / "proof.json"
        proof_path.write_text("{}")

        result = invoke('verify', str(proof_path))

        assert result.exit_code == 1
        assert 'Error: Invalid proof' in result.output

    def test_proof_index_out_of_range(self, invoke, abc_leaf_file, temp_dir):
        """Test an index past the last leaf is an error."""
        result = invoke('proof', '-i', '3', '-o', str(temp_dir / "proof.json"), str(abc_leaf_file))

        assert result.exit_code == 1
        assert 'out of range' in result.output

    def test_verify_uses_recorded_algorithm(self, invoke, make_leaf_file, temp_dir):
        """Test verify picks the hash recorded in the proof."""
        leaf_file = make_leaf_file(["A", "B", "C", "D", "E"])
        proof_path = temp_dir / "proof.json"
        result = invoke(
            'proof', '-a', 'blake2b', '-i', '4', '-o', str(proof_path), str(leaf_file)
        )
        assert result.exit_code == 0

        result = invoke('verify', str(proof_path))

        assert result.exit_code == 0
        assert 'Proof valid for leaf 4' in result.output

    def test_verify_rejects_edited_index(self, invoke, abc_leaf_file, temp_dir):
        """Test a proof relabelled with another leaf index is invalid."""
        proof_path = temp_dir / "proof.json"
        data = self.write_proof(invoke, abc_leaf_file, 0, proof_path)
        data["index"] = 2
        proof_path.write_text(json.dumps(data))

        result = invoke('verify', str(proof_path))

        assert result.exit_code == 1
        assert 'Proof invalid for leaf 2' in result.output

    def test_verify_logs_index_mismatch(self, invoke, abc_leaf_file, temp_dir):
        """Test an edited index is logged with its own failure reason."""
        proof_path = temp_dir / "proof.json"
        data = self.write_proof(invoke, abc_leaf_file, 1, proof_path)
        data["index"] = 0
        proof_path.write_text(json.dumps(data))

        invoke('verify', str(proof_path))

        entries = [
            json.loads(line)
            for line in (temp_dir / "merklet.log").read_text().splitlines()
            if line
        ]
        failures = [e for e in entries if e["event"] == "merkle_verification_failed"]
        assert failures[-1]["failure_reason"] == "index_mismatch"

    def test_valid_verify_is_quiet(self, runner, missing_config_path, abc_leaf_file, temp_dir):
        """Test a successful verify prints no log line at the default level."""
        proof_path = temp_dir / "proof.json"
        result = runner.invoke(
            cli,
            ['--config', str(missing_config_path), 'proof', '-i', '1', '-o', str(proof_path),
             str(abc_leaf_file)],
        )
        assert result.exit_code == 0

        result = runner.invoke(cli, ['--config', str(missing_config_path), 'verify', str(proof_path)])

        assert result.exit_code == 0
        assert result.output.strip() == "✓ Proof valid for leaf 1"
