"""
Test the file/directory front-end and the command line.
Builds .uhtml containers in a temp directory, extracts, and checks what
landed on disk.
"""
import os
import json
import shutil
import tempfile

import pytest

from picsparse import cli
from picsparse import manager
from picsparse.errors import ExtractionError, SourcePathError
from picsparse.extractor import ExtractionOptions
from picsparse.manager import (
    default_output_dir,
    export_report_json,
    extract_images_from_directory,
    extract_images_from_file,
    find_source_files,
)
from picsparse.parallel import ParallelBatchConfig, map_files, optimal_worker_count
from test_carve import NOISE, make_gif, make_jpeg, make_png


def build_container(path, blobs):
    with open(path, "wb") as f:
        f.write(NOISE)
        for blob in blobs:
            f.write(blob)
            f.write(NOISE)


@pytest.fixture
def workdir():
    tmpdir = tempfile.mkdtemp(prefix="picsparse_test_")
    try:
        yield tmpdir
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)


def test_extract_single_file(workdir):
    blobs = [make_jpeg(64, 64), make_gif(8, 8), make_png(120, 80), make_gif(33, 44)]
    src = os.path.join(workdir, "book.uhtml")
    build_container(src, blobs)

    result = extract_images_from_file(src)
    assert result.ok
    assert result.output_directory == os.path.join(workdir, "book")
    assert result.total_images == 3
    assert result.saved_images == 3

    names = sorted(os.listdir(result.output_directory))
    assert names == ["image_000.jpg", "image_001.png", "image_002.gif"]
    with open(os.path.join(result.output_directory, "image_001.png"), "rb") as f:
        assert f.read() == blobs[2]
    assert [os.path.basename(p) for p in result.saved_paths] == names


def test_extract_to_explicit_output_dir(workdir):
    src = os.path.join(workdir, "a.uhtml")
    build_container(src, [make_gif(10, 10)])
    out = os.path.join(workdir, "out", "nested")

    result = extract_images_from_file(src, out, ExtractionOptions(include_all=True))
    assert result.output_directory == out
    assert os.listdir(out) == ["image_000.gif"]


def test_source_path_errors(workdir):
    with pytest.raises(SourcePathError):
        extract_images_from_file(os.path.join(workdir, "missing.uhtml"))

    with pytest.raises(SourcePathError):
        extract_images_from_file(workdir)

    txt = os.path.join(workdir, "notes.txt")
    build_container(txt, [make_gif(40, 40)])
    with pytest.raises(SourcePathError):
        extract_images_from_file(txt)
    # A different source extension can be configured
    result = extract_images_from_file(txt, source_extension=".txt")
    assert result.saved_images == 1

    with pytest.raises(SourcePathError):
        extract_images_from_directory(os.path.join(workdir, "nope"))
    assert issubclass(SourcePathError, ExtractionError)


def test_save_failure_does_not_abort(workdir, monkeypatch):
    src = os.path.join(workdir, "book.uhtml")
    build_container(src, [make_gif(40, 40), make_gif(50, 50), make_gif(60, 60)])

    real_save = manager.save_image

    def flaky_save(output_dir, image):
        if image.index == 1:
            raise OSError("disk full")
        return real_save(output_dir, image)

    monkeypatch.setattr(manager, "save_image", flaky_save)
    result = extract_images_from_file(src)
    assert result.total_images == 3
    assert result.saved_images == 2
    assert sorted(os.listdir(result.output_directory)) == ["image_000.gif", "image_002.gif"]


def _build_tree(root):
    build_container(os.path.join(root, "one.uhtml"), [make_gif(40, 40)])
    build_container(os.path.join(root, "two.uhtml"), [make_jpeg(30, 30), make_png(30, 30)])
    build_container(os.path.join(root, "skip.bin"), [make_gif(40, 40)])
    os.makedirs(os.path.join(root, "sub"))
    build_container(os.path.join(root, "sub", "three.uhtml"), [make_gif(20, 20)])


def test_find_source_files(workdir):
    _build_tree(workdir)
    flat = find_source_files(workdir)
    assert [os.path.basename(p) for p in flat] == ["one.uhtml", "two.uhtml"]
    deep = find_source_files(workdir, recursive=True)
    assert len(deep) == 3


def test_extract_directory(workdir):
    _build_tree(workdir)

    results = extract_images_from_directory(workdir)
    assert [os.path.basename(r.source_file) for r in results] == ["one.uhtml", "two.uhtml"]
    assert [r.saved_images for r in results] == [1, 2]

    results = extract_images_from_directory(workdir, recursive=True)
    assert len(results) == 3
    assert all(r.ok for r in results)
    assert os.path.isfile(os.path.join(workdir, "sub", "three", "image_000.gif"))


def test_extension_match_is_case_sensitive(workdir):
    # b.uhtml and b.UHTML would both write into <dir>/b/
    build_container(os.path.join(workdir, "b.uhtml"), [make_gif(40, 40), make_gif(50, 50)])
    build_container(os.path.join(workdir, "b.UHTML"), [make_gif(60, 60)])

    results = extract_images_from_directory(workdir)
    assert [os.path.basename(r.source_file) for r in results] == ["b.uhtml"]
    assert results[0].saved_images == 2

    out = os.path.join(workdir, "b")
    assert sorted(os.listdir(out)) == ["image_000.gif", "image_001.gif"]
    with open(os.path.join(out, "image_000.gif"), "rb") as f:
        assert f.read() == make_gif(40, 40)
    assert sum(r.saved_images for r in results) == len(os.listdir(out))

    with pytest.raises(SourcePathError):
        extract_images_from_file(os.path.join(workdir, "b.UHTML"))


def test_directory_batch_records_per_file_errors(workdir):
    build_container(os.path.join(workdir, "good.uhtml"), [make_gif(40, 40)])
    build_container(os.path.join(workdir, "bad.uhtml"), [make_gif(40, 40)])
    # A plain file where bad.uhtml's output directory should go
    with open(os.path.join(workdir, "bad"), "w") as f:
        f.write("in the way")

    results = extract_images_from_directory(workdir)
    by_name = {os.path.basename(r.source_file): r for r in results}
    assert by_name["good.uhtml"].ok
    assert by_name["good.uhtml"].saved_images == 1
    assert not by_name["bad.uhtml"].ok
    assert by_name["bad.uhtml"].output_directory == ""
    assert by_name["bad.uhtml"].total_images == 0


def test_directory_batch_in_worker_processes(workdir):
    _build_tree(workdir)
    results = extract_images_from_directory(workdir, recursive=True, workers=2)
    assert [r.saved_images for r in results] == [1, 1, 2]


def test_worker_count():
    assert optimal_worker_count(0, ParallelBatchConfig()) == 1
    assert optimal_worker_count(1, ParallelBatchConfig(num_workers=4)) == 1
    assert optimal_worker_count(10, ParallelBatchConfig(num_workers=3)) == 3
    assert optimal_worker_count(3, ParallelBatchConfig(num_workers=16)) == 3
    assert 1 <= optimal_worker_count(100, ParallelBatchConfig()) <= 8
    assert map_files(len, ["a", "bb"], ParallelBatchConfig(num_workers=1)) == [1, 2]


def test_export_report_json(workdir):
    _build_tree(workdir)
    results = extract_images_from_directory(workdir)
    report_path = os.path.join(workdir, "report.json")
    export_report_json(results, report_path)

    with open(report_path) as f:
        report = json.load(f)
    assert report["total_files"] == 2
    assert report["successful_files"] == 2
    assert report["saved_images"] == 3
    assert report["files"][0]["error"] is None


def test_default_output_dir():
    assert default_output_dir("/data/x/book.uhtml") == os.path.join("/data/x", "book")


# ─────────────────────────────────────────────────────────────
#  Command line
# ─────────────────────────────────────────────────────────────

def test_parse_min_size():
    assert cli.parse_min_size("32x16") == (32, 16)
    assert cli.parse_min_size("10X10") == (10, 10)
    for bad in ("32", "axb", "1x2x3", "-1x5"):
        with pytest.raises(Exception):
            cli.parse_min_size(bad)


def test_cli_single_file(workdir):
    src = os.path.join(workdir, "book.uhtml")
    build_container(src, [make_gif(15, 15), make_gif(40, 40)])
    out = os.path.join(workdir, "out")

    assert cli.main([src, "-o", out]) == 0
    assert os.listdir(out) == ["image_000.gif"]

    out_all = os.path.join(workdir, "out_all")
    assert cli.main([src, "-o", out_all, "--all"]) == 0
    assert sorted(os.listdir(out_all)) == ["image_000.gif", "image_001.gif"]

    out_min = os.path.join(workdir, "out_min")
    assert cli.main([src, "-o", out_min, "--min-size", "10x10"]) == 0
    assert len(os.listdir(out_min)) == 2


def test_cli_directory_with_report(workdir):
    _build_tree(workdir)
    report_path = os.path.join(workdir, "report.json")
    assert cli.main([workdir, "-r", "-v", "--report", report_path]) == 0
    with open(report_path) as f:
        assert json.load(f)["total_files"] == 3


def test_cli_errors(workdir):
    assert cli.main([os.path.join(workdir, "missing.uhtml")]) == 1
    txt = os.path.join(workdir, "notes.txt")
    build_container(txt, [make_gif(40, 40)])
    assert cli.main([txt]) == 1
    assert cli.main([txt, "--ext", "txt"]) == 0

    # Report into a directory that does not exist
    src = os.path.join(workdir, "book.uhtml")
    build_container(src, [make_gif(40, 40)])
    out = os.path.join(workdir, "out")
    bad_report = os.path.join(workdir, "nodir", "r.json")
    assert cli.main([src, "-o", out, "--report", bad_report]) == 1
    assert os.listdir(out) == ["image_000.gif"]
    assert not os.path.exists(bad_report)


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--version"])
    assert exc.value.code == 0
    assert "0.1.0" in capsys.readouterr().out
