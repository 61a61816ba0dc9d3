import subprocess

import pytest

from nycflights_spark import extract_load


class _FakeProcess:
    def __init__(self, args, returncode, received):
        self.args = args
        self.returncode = returncode
        self.received = received

    def communicate(self, input=None):
        self.received[self.args[-1]] = input
        return None, None


@pytest.fixture()
def fake_docker(monkeypatch):
    """Records docker commands; uploads of names in `failing` exit 1."""
    state = {"runs": [], "received": {}, "failing": set()}

    def popen(args, stdin=None):
        hdfs_path = args[-1]
        code = 1 if hdfs_path.rsplit("/", 1)[-1] in state["failing"] else 0
        return _FakeProcess(args, code, state["received"])

    def run(args, check=False):
        state["runs"].append(args)
        return subprocess.CompletedProcess(args, 0)

    monkeypatch.setattr(extract_load.subprocess, "Popen", popen)
    monkeypatch.setattr(extract_load.subprocess, "run", run)
    return state


def test_upload_file(tmp_path, fake_docker):
    (tmp_path / "airlines.csv").write_bytes(b"carrier,name\nAA,American\n")

    assert extract_load.upload_file(str(tmp_path), "airlines.csv", "/user/x")
    assert fake_docker["received"]["/user/x/airlines.csv"] == b"carrier,name\nAA,American\n"


def test_upload_file_missing(tmp_path, fake_docker):
    assert not extract_load.upload_file(str(tmp_path), "flights.csv", "/user/x")
    assert fake_docker["received"] == {}


def test_upload_file_failure(tmp_path, fake_docker):
    (tmp_path / "planes.csv").write_bytes(b"tailnum\nN1\n")
    fake_docker["failing"].add("planes.csv")

    assert not extract_load.upload_file(str(tmp_path), "planes.csv", "/user/x")


def test_upload_all(tmp_path, fake_docker):
    for name in ("airlines", "planes", "weather"):
        (tmp_path / f"{name}.csv").write_bytes(b"x\n1\n")
    fake_docker["failing"].add("weather.csv")

    uploaded = extract_load.upload_all(
        str(tmp_path), "/user/x",
        ["weather.csv", "planes.csv", "airlines.csv", "flights.csv"],
        namenode="nn", max_workers=2)

    assert uploaded == ["airlines.csv", "planes.csv"]
    assert fake_docker["runs"] == [
        ["docker", "exec", "nn", "hdfs", "dfs", "-rm", "-r", "-f", "/user/x"],
        ["docker", "exec", "nn", "hdfs", "dfs", "-mkdir", "-p", "/user/x"],
    ]
