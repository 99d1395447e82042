import json

from phishguard import cli


def run(capsys, *argv):
    code = cli.main(list(argv))
    return code, capsys.readouterr()


def test_scan_prints_score(capsys):
    code, out = run(capsys, "--backend", "memory", "scan", "https://google.com")
    assert code == 0
    assert "Score: 100 Verdict: Safe" in out.out
    assert "No obvious threats detected" in out.out


def test_scan_json_output(capsys):
    code, out = run(capsys, "--backend", "memory", "scan", "--json",
                    "http://paypa1.com/login", "http://192.168.0.10/account")
    assert code == 0
    rows = json.loads(out.out)
    assert [r["score"] for r in rows] == [45, 40]


def test_rejected_input_sets_exit_status(capsys):
    code, out = run(capsys, "--backend", "memory", "scan", "not a url", "https://google.com")
    assert code == 2
    assert "rejected" in out.err
    assert "Score: 100" in out.out


def test_history_and_stats_use_persisted_file(tmp_path, capsys):
    history = str(tmp_path / "history.json")
    run(capsys, "--history-file", history, "--backend", "json", "scan", "https://google.com")
    run(capsys, "--history-file", history, "--backend", "json", "scan", "http://paypa1.com/login")

    code, out = run(capsys, "--history-file", history, "--backend", "json", "history", "--json")
    assert code == 0
    assert [r["url"] for r in json.loads(out.out)] == ["http://paypa1.com/login", "https://google.com"]

    code, out = run(capsys, "--history-file", history, "--backend", "json", "stats", "--json")
    stats = json.loads(out.out)
    assert stats["total_scans"] == 2
    assert stats["total_phishing"] == 1
    assert stats["total_safe"] == 1


def test_plain_history_and_stats(tmp_path, capsys):
    history = str(tmp_path / "history.json")
    run(capsys, "--history-file", history, "--backend", "json", "scan", "https://google.com")
    code, out = run(capsys, "--history-file", history, "--backend", "json", "history")
    assert code == 0
    assert "https://google.com" in out.out
    code, out = run(capsys, "--history-file", history, "--backend", "json", "stats")
    assert "Total scans : 1" in out.out
