import yaml

from curry.curry_handle import curry


def add3(a, b, c):
    return a + b + c


def test_silent_without_debug_env(monkeypatch, capsys):
    monkeypatch.delenv("CURRY_DEBUG", raising=False)
    assert curry(add3)(1)(2, 3) == 6
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_debug_lines(monkeypatch, capsys):
    monkeypatch.setenv("CURRY_DEBUG", "1")
    assert curry(add3)(1)(2, 3) == 6
    err = capsys.readouterr().err
    lines = err.splitlines()
    assert all(line.startswith("[DBG] ") for line in lines)
    events = [line.split()[1] for line in lines]
    assert events.count("bind") == 3
    assert "defer" in events
    assert "invoke" in events
    assert events[-1] == "rewrap"
    assert "func='add3'" in err


def test_debug_yaml_documents(monkeypatch, capsys):
    monkeypatch.setenv("CURRY_DEBUG", "yaml")
    curry(add3)(1, 2, 3)
    err = capsys.readouterr().err
    docs = [d for d in yaml.safe_load_all(err) if d]
    assert [d["event"] for d in docs] == ["bind", "defer", "bind", "defer", "bind", "invoke", "rewrap"]
    assert docs[0]["state"] == "'partial'"
    assert docs[-1]["ownership"] == "Ownership.OWNED"


def test_debug_json_documents(monkeypatch, capsys):
    monkeypatch.setenv("CURRY_DEBUG", "json")
    seen = []
    curry(seen.append)(1)
    err = capsys.readouterr().err
    assert '"event": "bind"' in err
    assert '"event": "rewrap"' in err
    assert '"result": "None"' in err
