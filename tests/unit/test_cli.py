"""
CLI Unit Tests
Tests for merklefs_cli/main.py and its commands.

Upload and download run against the in-process API by replacing the
commands' MerkleFSClient with one bound to a TestClient.
"""
import json

import pytest

from core.crypto.hashing import sha256
from core.http.remote import MerkleFSClient
from core.merkle.merkle_tree import MerkleTree
from fixtures import make_file_contents, write_files
from fixtures.common import TestClientHttp
from merklefs_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)


@pytest.fixture
def contents():
    return make_file_contents(5)


@pytest.fixture
def local_dir(tmp_path, contents):
    directory = tmp_path / "local"
    write_files(directory, contents)
    return directory


@pytest.fixture
def wired(monkeypatch, api_client):
    """Route the CLI's server client into the in-process app."""

    def factory(server_url, **kwargs):
        return MerkleFSClient("http://testserver", http=TestClientHttp(api_client))

    monkeypatch.setattr("merklefs_cli.commands.upload.MerkleFSClient", factory)
    monkeypatch.setattr("merklefs_cli.commands.download.MerkleFSClient", factory)
    return api_client


def expected_root(contents):
    return MerkleTree.from_hashes([sha256(c) for c in contents]).root


class TestNoCommand:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "merklefs" in capsys.readouterr().out

    def test_missing_config_file(self, capsys, tmp_path):
        code = main(["--config", str(tmp_path / "nope.json"), "root", str(tmp_path)])

        assert code == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestLocalCommands:
    """Tests for root / proof / verify."""

    def test_root_matches_tree(self, capsys, local_dir, contents):
        assert main(["root", str(local_dir)]) == EXIT_SUCCESS

        assert capsys.readouterr().out.strip() == expected_root(contents).hex()

    def test_root_json(self, capsys, local_dir, contents):
        assert main(["root", str(local_dir), "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data == {
            "root": expected_root(contents).hex(),
            "file_count": 5,
            "depth": 3,
        }

    def test_root_debug_logs_tree(self, caplog, local_dir, contents):
        assert main(["root", str(local_dir), "--debug"]) == EXIT_SUCCESS

        messages = [r.getMessage() for r in caplog.records]
        assert any("Level 0:" in m for m in messages)
        assert any(expected_root(contents).hex() in m for m in messages)

    def test_root_without_debug_is_quiet(self, caplog, local_dir):
        assert main(["root", str(local_dir)]) == EXIT_SUCCESS

        assert not any("Level 0:" in r.getMessage() for r in caplog.records)

    def test_root_missing_dir(self, capsys, tmp_path):
        assert main(["root", str(tmp_path / "missing")]) == EXIT_RUNTIME_ERROR

    def test_proof_hex_lines(self, capsys, local_dir, contents):
        assert main(["proof", str(local_dir), "2"]) == EXIT_SUCCESS

        lines = capsys.readouterr().out.split()
        tree = MerkleTree.from_hashes([sha256(c) for c in contents])
        assert lines == [s.hex() for s in tree.make_proof(2)]

    def test_proof_bad_index(self, capsys, local_dir):
        assert main(["proof", str(local_dir), "5"]) == EXIT_RUNTIME_ERROR
        assert "out of range" in capsys.readouterr().err

    def test_proof_then_verify(self, capsys, tmp_path, local_dir, contents):
        proof_path = tmp_path / "2.proof"
        root_hex = expected_root(contents).hex()
        target = sorted(local_dir.iterdir())[2]

        assert main(["proof", str(local_dir), "2", "--out", str(proof_path)]) == EXIT_SUCCESS
        assert proof_path.stat().st_size == 3 * 32

        code = main(["verify", str(target), "2", "--proof", str(proof_path), "--root", root_hex])

        assert code == EXIT_SUCCESS
        assert capsys.readouterr().out.strip().endswith("ok")

    def test_verify_wrong_index(self, capsys, tmp_path, local_dir, contents):
        proof_path = tmp_path / "2.proof"
        target = sorted(local_dir.iterdir())[2]
        main(["proof", str(local_dir), "2", "--out", str(proof_path)])
        capsys.readouterr()

        code = main([
            "verify", str(target), "3",
            "--proof", str(proof_path),
            "--root", expected_root(contents).hex(),
        ])

        assert code == EXIT_VERIFICATION_FAILED
        assert "File verification failed" in capsys.readouterr().err

    def test_verify_malformed_proof(self, capsys, tmp_path, local_dir, contents):
        proof_path = tmp_path / "bad.proof"
        proof_path.write_bytes(b"\x00" * 33)
        target = sorted(local_dir.iterdir())[0]

        code = main([
            "verify", str(target), "0",
            "--proof", str(proof_path),
            "--root", expected_root(contents).hex(),
        ])

        assert code == EXIT_RUNTIME_ERROR

    def test_verify_bad_root_hex(self, capsys, local_dir, tmp_path):
        proof_path = tmp_path / "empty.proof"
        proof_path.write_bytes(b"")
        target = sorted(local_dir.iterdir())[0]

        code = main(["verify", str(target), "0", "--proof", str(proof_path), "--root", "xyz"])

        assert code == EXIT_RUNTIME_ERROR
        assert "Invalid hex string" in capsys.readouterr().err


class TestUploadDownload:
    """Tests for upload / download against the in-process server."""

    def test_upload_prints_root(self, capsys, wired, local_dir, contents):
        assert main(["upload", str(local_dir)]) == EXIT_SUCCESS

        assert capsys.readouterr().out.strip() == expected_root(contents).hex()
        assert wired.get("/root").json()["root"] == expected_root(contents).hex()

    def test_upload_keeps_local_files(self, capsys, wired, local_dir):
        before = sorted(p.name for p in local_dir.iterdir())

        main(["upload", str(local_dir)])

        assert sorted(p.name for p in local_dir.iterdir()) == before

    def test_upload_progress_bar(self, capsys, wired, local_dir):
        assert main(["upload", str(local_dir)]) == EXIT_SUCCESS

        captured = capsys.readouterr()
        assert "Uploading:" in captured.err
        assert "5/5" in captured.err
        assert "Uploading:" not in captured.out

    def test_upload_no_progress(self, capsys, wired, local_dir):
        assert main(["upload", str(local_dir), "--no-progress"]) == EXIT_SUCCESS

        assert "Uploading:" not in capsys.readouterr().err

    def test_upload_json(self, capsys, wired, local_dir, contents):
        assert main(["upload", str(local_dir), "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data == {"root": expected_root(contents).hex(), "file_count": 5}

    def test_download_verified_to_file(self, capsys, wired, local_dir, contents, tmp_path):
        main(["upload", str(local_dir)])
        root_hex = capsys.readouterr().out.strip()
        out = tmp_path / "3.bin"

        code = main(["download", "3", "--root", root_hex, "--out", str(out)])

        assert code == EXIT_SUCCESS
        assert out.read_bytes() == contents[3]

    def test_download_root_from_stdin(self, capsys, monkeypatch, wired, local_dir, contents, tmp_path):
        import io

        main(["upload", str(local_dir)])
        root_hex = capsys.readouterr().out.strip()
        monkeypatch.setattr("sys.stdin", io.StringIO(root_hex + "\n"))
        out = tmp_path / "0.bin"

        assert main(["download", "0", "--out", str(out)]) == EXIT_SUCCESS
        assert out.read_bytes() == contents[0]

    def test_download_mismatch_exits_2(self, capsys, wired, local_dir, tmp_path):
        main(["upload", str(local_dir)])
        capsys.readouterr()
        out = tmp_path / "1.bin"
        wrong_root = sha256(b"someone else's root").hex()

        code = main(["download", "1", "--root", wrong_root, "--out", str(out)])

        err = capsys.readouterr().err
        assert code == EXIT_VERIFICATION_FAILED
        assert "File verification failed" in err
        assert f"Expected merkle root: {wrong_root}" in err
        assert not out.exists()

    def test_download_missing_index(self, capsys, wired, local_dir, contents, tmp_path):
        main(["upload", str(local_dir)])
        capsys.readouterr()

        code = main(["download", "9", "--root", expected_root(contents).hex()])

        assert code == EXIT_RUNTIME_ERROR
        assert "Failed to download file index 9" in capsys.readouterr().err


class TestConfigCommand:
    """Tests for config --init / --show."""

    def test_init_then_show(self, capsys, tmp_path):
        path = tmp_path / "merklefs.json"

        assert main(["config", "--init", "--path", str(path)]) == EXIT_SUCCESS
        assert json.loads(path.read_text())["server"]["port"] == 8080
        capsys.readouterr()

        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["client"]["server_url"] == "http://127.0.0.1:8080"

    def test_init_refuses_overwrite(self, capsys, tmp_path):
        path = tmp_path / "merklefs.json"
        path.write_text("{}")

        assert main(["config", "--init", "--path", str(path)]) == EXIT_RUNTIME_ERROR
        assert path.read_text() == "{}"


class TestServeCommand:
    """Tests for serve argument handling."""

    def test_overrides_reach_server(self, monkeypatch, tmp_path):
        seen = {}
        monkeypatch.setattr("api.app.run_server", lambda config: seen.setdefault("config", config))

        code = main(["serve", "--port", "9123", "--storage-dir", str(tmp_path / "s")])

        assert code == EXIT_SUCCESS
        assert seen["config"].server.port == 9123
        assert seen["config"].server.storage_dir == str(tmp_path / "s")
