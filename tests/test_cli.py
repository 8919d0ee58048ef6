"""Tests for the command line interface and configuration."""
import json

import numpy as np
import pytest
from PIL import Image

from blobtrace.cli import create_parser, main
from blobtrace.types import LabelConfig, Roi


@pytest.fixture
def shapes_png(tmp_path):
    """White shapes on black: a ring with a hole and a separate square."""
    gray = np.zeros((20, 30), dtype=np.uint8)
    gray[2:9, 2:9] = 255
    gray[5, 5] = 0
    gray[12:16, 20:25] = 200
    path = tmp_path / "shapes.png"
    Image.fromarray(gray).save(path)
    return path


class TestParser:
    """Test argument parsing."""

    def test_defaults(self):
        """Test default option values."""
        parsed = create_parser().parse_args(["in.png", "out.png"])

        assert parsed.roi_x == 0 and parsed.roi_y == 0
        assert parsed.roi_w is None and parsed.roi_h is None
        assert parsed.threshold == 128
        assert parsed.json == "blob.json"
        assert parsed.plot == "blob.plot"
        assert not parsed.no_internal

    def test_otsu_threshold(self):
        """Test 'otsu' is accepted as threshold."""
        parsed = create_parser().parse_args(["a", "b", "-t", "otsu"])

        assert parsed.threshold == "otsu"

    @pytest.mark.parametrize("value", ["300", "-1", "mean"])
    def test_bad_threshold(self, value):
        """Test invalid thresholds exit with a usage error."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["a", "b", "-t", value])


class TestMain:
    """Test the full program."""

    def test_writes_outputs(self, tmp_path, shapes_png):
        """Test label image, JSON, plot and SVG are written."""
        out = tmp_path / "labels.png"
        json_path = tmp_path / "blob.json"
        plot_path = tmp_path / "blob.plot"
        svg_path = tmp_path / "blob.svg"

        code = main([
            str(shapes_png), str(out),
            "--json", str(json_path),
            "--plot", str(plot_path),
            "--svg", str(svg_path),
        ])

        assert code == 0
        assert out.exists() and plot_path.exists() and svg_path.exists()
        with Image.open(out) as img:
            assert img.size == (30, 20)

        doc = json.loads(json_path.read_text())
        assert [b["label"] for b in doc["blobs"]] == [1, 2]
        assert doc["blobs"][0]["euler_number"] == 1
        assert len(doc["blobs"][0]["internals"]) == 1
        assert doc["blobs"][1]["euler_number"] == 0

    def test_roi(self, tmp_path, shapes_png):
        """Test the ROI options restrict labeling."""
        out = tmp_path / "labels.png"
        json_path = tmp_path / "blob.json"

        code = main([
            str(shapes_png), str(out),
            "-x", "15", "-y", "10", "-W", "100",
            "--json", str(json_path),
            "--plot", str(tmp_path / "blob.plot"),
        ])

        assert code == 0
        with Image.open(out) as img:
            assert img.size == (15, 10)
        doc = json.loads(json_path.read_text())
        assert len(doc["blobs"]) == 1
        assert doc["blobs"][0]["external"][0] == [20, 12]

    def test_no_internal(self, tmp_path, shapes_png):
        """Test holes are only counted with --no-internal."""
        json_path = tmp_path / "blob.json"

        code = main([
            str(shapes_png), str(tmp_path / "labels.png"),
            "--no-internal",
            "--json", str(json_path),
            "--plot", str(tmp_path / "blob.plot"),
        ])

        assert code == 0
        blob = json.loads(json_path.read_text())["blobs"][0]
        assert "internals" not in blob
        assert blob["euler_number"] == 1

    def test_missing_input(self, tmp_path, capsys):
        """Test a missing input file fails with exit code 1."""
        code = main([str(tmp_path / "missing.png"), str(tmp_path / "out.png")])

        assert code == 1
        assert "not found" in capsys.readouterr().err

    def test_unreadable_input(self, tmp_path, capsys):
        """Test an unreadable image fails with exit code 1."""
        path = tmp_path / "junk.png"
        path.write_bytes(b"junk")

        code = main([str(path), str(tmp_path / "out.png")])

        assert code == 1
        assert "Error" in capsys.readouterr().err


class TestLabelConfig:
    """Test configuration validation."""

    def test_defaults(self):
        """Test default configuration."""
        config = LabelConfig()

        assert config.roi is None
        assert config.threshold == 128
        assert config.extract_internal

    def test_roi(self):
        """Test a ROI can be set."""
        assert LabelConfig(roi=Roi(1, 2, 3, 4)).roi.width == 3

    @pytest.mark.parametrize("threshold", [256, -5, "median"])
    def test_invalid_threshold(self, threshold):
        """Test invalid thresholds are rejected."""
        with pytest.raises(ValueError):
            LabelConfig(threshold=threshold)
