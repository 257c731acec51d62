"""Tests for the scanix command line."""

import pytest

from conftest import image_width, make_image_bytes
from scanix.cli import collect_image_files, main
from scanix.config import ENV_VARS
from scanix.storage.database import ScanDatabase


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    """Run every command from an empty directory with a clean environment."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def image_files(tmp_path):
    paths = []
    for i, width in enumerate((10, 20, 30)):
        path = tmp_path / "capture" / f"page_{i}.png"
        path.parent.mkdir(exist_ok=True)
        path.write_bytes(make_image_bytes(width=width))
        paths.append(path)
    return paths


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cli.db"


def run(db_path, *args):
    main(["--database", str(db_path), *args])


def only_scan(db_path):
    scans = ScanDatabase(db_path).list_scans()
    assert len(scans) == 1
    return scans[0]


def test_scan_creates_scan_in_argument_order(db_path, image_files, capsys):
    run(db_path, "scan", str(image_files[2]), str(image_files[0]))

    scan = only_scan(db_path)
    assert [image_width(p.image_data) for p in scan.sorted_pages] == [30, 10]
    assert "Created scan" in capsys.readouterr().out


def test_scan_accepts_directory(db_path, image_files):
    run(db_path, "scan", str(image_files[0].parent))
    assert only_scan(db_path).page_count == 3


def test_scan_with_no_decodable_files_fails(db_path, tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not a png")

    with pytest.raises(SystemExit) as exc:
        run(db_path, "scan", str(bad))

    assert exc.value.code == 1
    assert "no scan created" in capsys.readouterr().out
    assert ScanDatabase(db_path).count() == 0


def test_add_pages_by_id_prefix(db_path, image_files, capsys):
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)

    run(db_path, "add-pages", scan.id[:8], str(image_files[1]), str(image_files[2]))

    assert only_scan(db_path).page_count == 3
    assert "Added 2 page(s)" in capsys.readouterr().out


def test_list_and_search(db_path, image_files, capsys):
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)
    run(db_path, "rename", scan.id, "Quarterly Bills")
    capsys.readouterr()

    run(db_path, "list", "--search", "bills")
    out = capsys.readouterr().out
    assert "Quarterly Bills" in out
    assert "Total: 1 scan(s)" in out

    run(db_path, "list", "--search", "zebra")
    assert "No scans found" in capsys.readouterr().out


def test_list_empty(db_path, capsys):
    run(db_path, "list")
    assert "No scans yet" in capsys.readouterr().out


def test_show(db_path, image_files, capsys):
    run(db_path, "scan", *map(str, image_files))
    scan = only_scan(db_path)
    capsys.readouterr()

    run(db_path, "show", scan.id)

    out = capsys.readouterr().out
    assert scan.id in out
    assert "Pages:    3" in out


def test_rename_to_empty(db_path, image_files):
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)

    run(db_path, "rename", scan.id, "")

    assert only_scan(db_path).name == ""


def test_move_page(db_path, image_files, capsys):
    run(db_path, "scan", *map(str, image_files))
    scan = only_scan(db_path)
    last = scan.sorted_pages[2]

    run(db_path, "move-page", scan.id, last.id, "up")

    moved = only_scan(db_path)
    assert moved.sorted_pages[1].id == last.id
    assert "position 2" in capsys.readouterr().out


def test_move_first_page_up_is_noop(db_path, image_files, capsys):
    run(db_path, "scan", *map(str, image_files))
    scan = only_scan(db_path)
    first = scan.sorted_pages[0]

    run(db_path, "move-page", scan.id, first.id[:10], "up")

    assert only_scan(db_path).sorted_pages[0].id == first.id
    assert "already at the top" in capsys.readouterr().out


def test_delete_page_and_cascade(db_path, image_files, capsys):
    run(db_path, "scan", str(image_files[0]), str(image_files[1]))
    scan = only_scan(db_path)
    first, second = scan.sorted_pages

    run(db_path, "delete-page", scan.id, first.id)
    remaining = only_scan(db_path)
    assert [p.order_index for p in remaining.pages] == [0]

    run(db_path, "delete-page", scan.id, second.id)
    assert ScanDatabase(db_path).count() == 0
    assert "has been removed" in capsys.readouterr().out


def test_delete_scan(db_path, image_files):
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)

    run(db_path, "delete", scan.id)

    assert ScanDatabase(db_path).count() == 0


def test_unknown_scan_exits_with_error(db_path, capsys):
    with pytest.raises(SystemExit) as exc:
        run(db_path, "show", "abc123")
    assert exc.value.code == 1
    assert "No scan found" in capsys.readouterr().out


def test_unknown_page_exits_with_error(db_path, image_files, capsys):
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)

    with pytest.raises(SystemExit):
        run(db_path, "delete-page", scan.id, "zzzz")
    assert "no page matching" in capsys.readouterr().out


def test_export(db_path, image_files, tmp_path, capsys):
    run(db_path, "scan", *map(str, image_files))
    scan = only_scan(db_path)
    run(db_path, "rename", scan.id, "Lease")

    run(db_path, "export", scan.id, "--output", str(tmp_path / "pdfs"))

    pdf = tmp_path / "pdfs" / "Lease.pdf"
    assert pdf.read_bytes().startswith(b"%PDF")
    assert "Exported" in capsys.readouterr().out


def test_export_uses_configured_directory(db_path, image_files, workdir, monkeypatch):
    monkeypatch.setenv("SCANIX_EXPORT_DIR", str(workdir / "configured"))
    run(db_path, "scan", str(image_files[0]))
    scan = only_scan(db_path)
    run(db_path, "rename", scan.id, "Memo")

    run(db_path, "export", scan.id)

    assert (workdir / "configured" / "Memo.pdf").exists()


def test_save_photos(db_path, image_files, workdir, monkeypatch, capsys):
    monkeypatch.setenv("SCANIX_PHOTOS_DIR", str(workdir / "photos"))
    run(db_path, "scan", *map(str, image_files))
    scan = only_scan(db_path)

    run(db_path, "save-photos", scan.id, "--page", "2")
    assert len(list((workdir / "photos").iterdir())) == 1

    run(db_path, "save-photos", scan.id)
    assert len(list((workdir / "photos").iterdir())) == 4
    assert "Saved 3 image(s)" in capsys.readouterr().out


def test_bad_config_exits(db_path, tmp_path, capsys):
    config = tmp_path / "bad.yaml"
    config.write_text("nonsense_key: 1\n")

    with pytest.raises(SystemExit) as exc:
        main(["--database", str(db_path), "--config", str(config), "list"])

    assert exc.value.code == 1
    assert "Unknown config keys" in capsys.readouterr().out


def test_collect_image_files_skips_missing_and_non_images(tmp_path, capsys):
    (tmp_path / "a.png").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("x")

    files = collect_image_files([str(tmp_path), str(tmp_path / "missing.jpg")])

    assert [f.name for f in files] == ["a.png"]
    assert "does not exist" in capsys.readouterr().out
