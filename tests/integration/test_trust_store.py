"""Parallel json-env processes sharing one trust store file."""

from __future__ import annotations

import subprocess
import sys


COUNT = 24


def _run_all(tmp_path, env, argvs):
    procs = [
        subprocess.Popen(
            [sys.executable, "-m", "json_env", *argv],
            cwd=tmp_path,
            env=env,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
        for argv in argvs
    ]
    return [(p.wait(timeout=120), p.stderr.read()) for p in procs]


def _states(json_env):
    result = json_env("--list-whitelist")
    assert result.returncode == 0, result.stderr
    return dict(line.split("\t")[::-1] for line in result.stdout.splitlines())


class TestParallelWriters:
    def test_every_whitelist_is_kept(self, json_env, json_env_environ, tmp_path):
        configs = []
        for i in range(COUNT):
            path = tmp_path / f"c{i}.json"
            path.write_text(f'{{"N": {i}}}', encoding="utf-8")
            configs.append(path)

        argvs = [["-c", str(c), "--whitelist"] for c in configs]
        results = _run_all(tmp_path, json_env_environ, argvs)
        assert results == [(0, "")] * COUNT

        states = _states(json_env)
        assert states == {str(c.resolve()): "approved" for c in configs}

    def test_every_unwhitelist_is_kept(self, json_env, json_env_environ, tmp_path):
        configs = []
        for i in range(COUNT):
            path = tmp_path / f"c{i}.json"
            path.write_text("{}", encoding="utf-8")
            configs.append(path)
        config_args = [arg for c in configs for arg in ("-c", str(c))]
        assert json_env(*config_args, "--whitelist").returncode == 0

        revoked, kept = configs[::2], configs[1::2]
        extra = [tmp_path / f"extra{i}.json" for i in range(len(kept))]
        for path in extra:
            path.write_text("[]", encoding="utf-8")
        argvs = [["-c", str(c), "--unwhitelist"] for c in revoked]
        argvs += [["-c", str(c), "--whitelist"] for c in extra]
        assert [code for code, _ in _run_all(tmp_path, json_env_environ, argvs)] == [0] * len(argvs)

        states = _states(json_env)
        assert {p: s for p, s in states.items() if s == "revoked"} == {
            str(c.resolve()): "revoked" for c in revoked
        }
        assert {p for p, s in states.items() if s == "approved"} == {
            str(c.resolve()) for c in kept + extra
        }
