from __future__ import annotations

import json

import imageio.v2 as imageio
import numpy as np
import pytest

from mrfmotion import __version__
from mrfmotion.cli import main


def _write_pair(tmp_path, shape1=(8, 10), shape2=(8, 10)):
    a = np.full(shape1, 100, dtype=np.uint8)
    b = np.full(shape2, 100, dtype=np.uint8)
    b[2:5, 3:6] = 200
    p1 = tmp_path / "frame1.png"
    p2 = tmp_path / "frame2.png"
    imageio.imwrite(p1, a)
    imageio.imwrite(p2, b)
    return str(p1), str(p2)


def test_detect_writes_all_outputs(tmp_path, capsys):
    f1, f2 = _write_pair(tmp_path)
    out = tmp_path / "out"
    main(["detect", f1, f2, str(out), "--iterations", "2", "--plot"])

    for name in ("abs_difference.png", "fixed.png", "mrf1.png", "mrf2.png", "results.png"):
        assert (out / name).exists(), name
    fixed = imageio.imread(out / "fixed.png")
    assert fixed[3, 4] == 255
    assert fixed[0, 0] == 0
    text = capsys.readouterr().out
    assert "Fixed threshold: 11.25% moving" in text
    assert "Variable threshold - MRF2" in text


def test_detect_method_selection_and_config(tmp_path):
    f1, f2 = _write_pair(tmp_path)
    cfg = tmp_path / "params.yaml"
    cfg.write_text("theta: 1\nsigma_s: 100\nT: 2\n", encoding="utf-8")
    out = tmp_path / "out"
    main(["detect", f1, f2, str(out), "--methods", "fixed", "--config", str(cfg)])
    assert (out / "fixed.png").exists()
    assert not (out / "mrf1.png").exists()
    # sigma_s=100 puts the threshold far above 100**2
    assert not imageio.imread(out / "fixed.png").any()

    main(["detect", f1, f2, str(out), "--methods", "fixed", "--config", str(cfg), "--sigma-s", "1.22"])
    assert imageio.imread(out / "fixed.png").any()


def test_detect_dimension_mismatch_is_usage_error(tmp_path, capsys):
    f1, f2 = _write_pair(tmp_path, shape1=(3, 3), shape2=(4, 4))
    out = tmp_path / "out"
    with pytest.raises(SystemExit) as info:
        main(["detect", f1, f2, str(out)])
    assert info.value.code == 2
    assert "same size" in capsys.readouterr().err
    assert not out.exists()

    with pytest.raises(SystemExit) as info:
        main(["detect", f1, f2, str(out), "--methods", "mrf2"])
    assert info.value.code == 2
    assert not out.exists()


def test_unknown_method_rejected(tmp_path):
    f1, f2 = _write_pair(tmp_path)
    with pytest.raises(SystemExit) as info:
        main(["detect", f1, f2, str(tmp_path / "out"), "--methods", "mrf3"])
    assert info.value.code == 2


def test_bench_command(tmp_path, capsys):
    out = tmp_path / "bench.json"
    main(["bench", "--size", "12x16", "--iterations", "1", "--out", str(out)])
    saved = json.loads(out.read_text(encoding="utf-8"))
    printed = json.loads(capsys.readouterr().out)
    assert saved["size"] == [12, 16] == printed["size"]
    assert saved["iterations"] == 1


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert capsys.readouterr().out.startswith(f"mrfmotion {__version__}")
