import json

import pytest

from resbundle import __version__
from resbundle.cli import main


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "scripts").mkdir()
    (tmp_path / "scripts" / "init.lua").write_bytes(b"print(1)\n")
    (tmp_path / "logo.png").write_bytes(b"\x89PNG")
    return tmp_path


def test_generate(assets, capsys):
    out = assets / "resources.c"
    rc = main(
        [
            "generate",
            "-o",
            str(out),
            "--base-dir",
            str(assets),
            "scripts/init.lua",
            "logo.png",
        ]
    )
    assert rc == 0
    text = out.read_text(encoding="utf-8")
    assert "const unsigned char SCRIPTS_INIT_LUA[]" in text
    assert "unsigned int  LOGO_PNG_SIZE = 4;" in text
    err = capsys.readouterr().err
    assert "Bundle summary: output=resources.c resources=2" in err


def test_generate_with_flags(assets):
    out = assets / "resources.c"
    header = assets / "resources.h"
    manifest = assets / "resources.json"
    rc = main(
        [
            "generate",
            "-o",
            str(out),
            "--header",
            str(header),
            "--emit-manifest",
            str(manifest),
            "--prefix",
            "RES_",
            "--no-null-terminate",
            "--retention",
            "none",
            "--base-dir",
            str(assets),
            "logo.png",
        ]
    )
    assert rc == 0
    text = out.read_text(encoding="utf-8")
    assert text.startswith("#define FORCE_REF_SYMBOL(x)\n")
    assert "RES_LOGO_PNG[] = { 0x89, 0x50, 0x4e, 0x47 };" in text
    assert "extern const unsigned char RES_LOGO_PNG[];" in header.read_text(
        encoding="utf-8"
    )
    data = json.loads(manifest.read_text(encoding="utf-8"))
    assert data["resources"][0]["identifier"] == "RES_LOGO_PNG"


def test_generate_from_config_and_input_list(assets, monkeypatch):
    monkeypatch.chdir(assets)
    (assets / "bundle.yaml").write_text(
        "resources: [logo.png]\noutput: out.c\nprefix: CFG_\n",
        encoding="utf-8",
    )
    (assets / "inputs.txt").write_text("scripts/init.lua\n", encoding="utf-8")
    rc = main(
        [
            "generate",
            "-c",
            str(assets / "bundle.yaml"),
            "--input-list",
            str(assets / "inputs.txt"),
            "--prefix",
            "CLI_",
        ]
    )
    assert rc == 0
    text = (assets / "out.c").read_text(encoding="utf-8")
    # Flag wins over config; config resources come first.
    assert text.index("CLI_LOGO_PNG[]") < text.index("CLI_SCRIPTS_INIT_LUA[]")
    assert "CFG_" not in text


def test_config_resources_and_cli_resources_use_their_own_roots(
    tmp_path, monkeypatch
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cfg").mkdir()
    (tmp_path / "cfg" / "a.bin").write_bytes(b"\x0a")
    (tmp_path / "cfg" / "bundle.yaml").write_text(
        "resources: [a.bin]\n", encoding="utf-8"
    )
    (tmp_path / "b.bin").write_bytes(b"\x0b")
    (tmp_path / "inputs.txt").write_text("c.bin\n", encoding="utf-8")
    (tmp_path / "c.bin").write_bytes(b"\x0c")
    rc = main(
        [
            "generate",
            "-c",
            "cfg/bundle.yaml",
            "--input-list",
            "inputs.txt",
            "-o",
            "out.c",
            "--no-null-terminate",
            "b.bin",
        ]
    )
    assert rc == 0
    text = (tmp_path / "out.c").read_text(encoding="utf-8")
    assert "const unsigned char A_BIN[] = { 0x0a };" in text
    assert "const unsigned char B_BIN[] = { 0x0b };" in text
    assert "const unsigned char C_BIN[] = { 0x0c };" in text


def test_config_resources_plan_from_config_directory(
    tmp_path, monkeypatch, capsys
):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cfg").mkdir()
    (tmp_path / "cfg" / "a.bin").write_bytes(b"abc")
    (tmp_path / "cfg" / "bundle.yaml").write_text(
        "resources: [a.bin]\n", encoding="utf-8"
    )
    (tmp_path / "b.bin").write_bytes(b"b")
    rc = main(["plan", "--json", "-c", "cfg/bundle.yaml", "b.bin"])
    assert rc == 0
    rows = json.loads(capsys.readouterr().out)
    assert [(r["path"], r["size"]) for r in rows] == [
        ("a.bin", 3),
        ("b.bin", 1),
    ]


def test_negative_max_size_is_rejected(assets, capsys):
    rc = main(
        [
            "generate",
            "-o",
            str(assets / "r.c"),
            "--max-size",
            "-1",
            "--base-dir",
            str(assets),
            "logo.png",
        ]
    )
    assert rc == 1
    err = capsys.readouterr().err
    assert "E_CONFIG" in err
    assert "max resource size" in err
    assert not (assets / "r.c").exists()


def test_missing_file_fails_with_path(assets, capsys):
    out = assets / "resources.c"
    rc = main(
        ["generate", "-o", str(out), "--base-dir", str(assets), "gone.bin"]
    )
    assert rc == 1
    err = capsys.readouterr().err
    assert "E_INPUT_NOT_FOUND" in err
    assert "gone.bin" in err
    assert not out.exists()


def test_collision_fails(assets, capsys):
    rc = main(
        [
            "generate",
            "-o",
            str(assets / "r.c"),
            "--base-dir",
            str(assets),
            "logo.png",
            "logo-png",
        ]
    )
    assert rc == 1
    assert "E_IDENT_COLLISION" in capsys.readouterr().err


def test_output_is_required(assets, capsys):
    rc = main(["generate", "--base-dir", str(assets), "logo.png"])
    assert rc == 1
    assert "E_CONFIG" in capsys.readouterr().err


def test_dry_run(assets, capsys):
    out = assets / "resources.c"
    rc = main(
        [
            "generate",
            "-o",
            str(out),
            "--dry-run",
            "--base-dir",
            str(assets),
            "logo.png",
        ]
    )
    assert rc == 0
    assert not out.exists()
    assert "[DRY RUN]" in capsys.readouterr().err


def test_plan_json(assets, capsys):
    rc = main(
        [
            "plan",
            "--json",
            "--base-dir",
            str(assets),
            "scripts/init.lua",
            "logo.png",
        ]
    )
    assert rc == 0
    rows = json.loads(capsys.readouterr().out)
    assert rows == [
        {"path": "scripts/init.lua", "identifier": "SCRIPTS_INIT_LUA",
         "size": 9},
        {"path": "logo.png", "identifier": "LOGO_PNG", "size": 4},
    ]


def test_inspect(assets, capsys):
    out = assets / "resources.c"
    assert main(
        ["generate", "-o", str(out), "--base-dir", str(assets), "logo.png"]
    ) == 0
    capsys.readouterr()
    rc = main(["inspect", str(out), "--json"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data["issues"] == []
    assert data["resources"][0]["identifier"] == "LOGO_PNG"
    assert data["resources"][0]["size"] == 4
    assert data["resources"][0]["elements"] == 5


def test_inspect_reports_issues(tmp_path, capsys):
    bad = tmp_path / "bad.c"
    bad.write_text(
        "unsigned int  X_SIZE = 3;\nconst unsigned char X[] = { 0x01 };\n",
        encoding="utf-8",
    )
    assert main(["inspect", str(bad)]) == 1
    assert "WARN" in capsys.readouterr().err


def test_json_reporter_emits_summary(assets, capsys):
    out = assets / "resources.c"
    rc = main(
        [
            "-r",
            "json",
            "generate",
            "-o",
            str(out),
            "--base-dir",
            str(assets),
            "logo.png",
        ]
    )
    assert rc == 0
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    summaries = [e for e in events if e["event"] == "summary"]
    assert len(summaries) == 1
    assert summaries[0]["summary_type"] == "bundle"
    assert summaries[0]["resources"] == "1"
    assert summaries[0]["changed"] == "1"
    task_ends = {e["id"]: e for e in events if e["event"] == "task_end"}
    assert task_ends["bundle.collect"]["status"] == "success"
    assert task_ends["bundle.collect"]["files"] == 1


def test_silent_reporter(assets, capsys):
    rc = main(
        [
            "-r",
            "silent",
            "generate",
            "-o",
            str(assets / "r.c"),
            "--base-dir",
            str(assets),
            "logo.png",
        ]
    )
    assert rc == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out
