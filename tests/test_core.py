"""
Tests for the vstab package collaborators: config, outputs, rendering,
motion estimation, dump files and the command line.
"""

import json
import math

import pytest
import numpy as np


class TestStabilizerConfig:
    """Tests for StabilizerConfig."""

    def test_defaults(self):
        """Test default settings."""
        from vstab.core.config import StabilizerConfig

        config = StabilizerConfig()
        assert config.smoothing_radius == 50
        assert config.frame_cap == 500
        assert config.method == "lk_sparse"
        assert config.outputs == ["video"]

    def test_save_and_load(self, tmp_path):
        """Test JSON persistence."""
        from vstab.core.config import StabilizerConfig, load_config

        path = tmp_path / "config.json"
        StabilizerConfig(smoothing_radius=12, method="farneback").save(path)

        loaded = load_config(path)
        assert loaded.smoothing_radius == 12
        assert loaded.method == "farneback"
        assert loaded.frame_cap == 500

    def test_load_partial_file(self, tmp_path):
        """Missing keys take defaults, unknown keys are ignored."""
        from vstab.core.config import load_config

        path = tmp_path / "config.json"
        path.write_text(json.dumps({"frame_cap": 100, "colour": "blue"}))

        config = load_config(path)
        assert config.frame_cap == 100
        assert config.smoothing_radius == 50

    def test_load_missing_file(self, tmp_path):
        from vstab.core.config import load_config

        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_env_overrides(self, monkeypatch):
        """Environment values are coerced to field types."""
        from vstab.core.config import StabilizerConfig, get_env_config

        monkeypatch.setenv("VSTAB_SMOOTHING_RADIUS", "30")
        monkeypatch.setenv("VSTAB_BORDER_CROP_RATIO", "0.1")
        monkeypatch.setenv("VSTAB_OUTPUTS", "video,compare")

        config = StabilizerConfig().with_overrides(get_env_config())
        assert config.smoothing_radius == 30
        assert config.border_crop_ratio == pytest.approx(0.1)
        assert config.outputs == ["video", "compare"]

    def test_overrides_skip_none_and_unknown(self):
        from vstab.core.config import StabilizerConfig

        config = StabilizerConfig().with_overrides({"method": None, "bogus": 1, "frame_cap": 20})
        assert config.method == "lk_sparse"
        assert config.frame_cap == 20

    def test_validate(self):
        """Out of range values are rejected."""
        from vstab.core.config import StabilizerConfig

        StabilizerConfig().validate()
        with pytest.raises(ValueError):
            StabilizerConfig(smoothing_radius=-1).validate()
        with pytest.raises(ValueError):
            StabilizerConfig(frame_cap=0).validate()
        with pytest.raises(ValueError):
            StabilizerConfig(border_crop_ratio=1.0).validate()

    def test_validate_smoothing_method(self, monkeypatch):
        """A bad smoothing method from the environment fails before any video work."""
        from vstab.core.config import StabilizerConfig, get_env_config

        monkeypatch.setenv("VSTAB_SMOOTHING_METHOD", "gaussian")
        config = StabilizerConfig().with_overrides(get_env_config())
        with pytest.raises(ValueError, match="Unknown smoothing method"):
            config.validate()
        StabilizerConfig(smoothing_method="cumsum").validate()

    def test_example_config(self, tmp_path):
        from vstab.core.config import create_example_config, load_config

        path = tmp_path / "example.json"
        create_example_config(path)
        assert "compare" in load_config(path).outputs


class TestOutputSpec:
    """Tests for OutputSpec parser."""

    def test_simple_spec(self):
        """Test parsing simple spec."""
        from vstab.outputs import OutputSpec

        spec = OutputSpec("video")
        assert spec.output_type == "video"
        assert len(spec.options) == 0

    def test_spec_with_options(self):
        """Test parsing spec with options."""
        from vstab.outputs import OutputSpec

        spec = OutputSpec("frames=dir=out/images:source=compare")
        assert spec.output_type == "frames"
        assert spec.get('dir') == "out/images"
        assert spec.get('source') == "compare"

    def test_value_with_colon(self):
        from vstab.outputs import OutputSpec

        spec = OutputSpec("video=filename=C:/clips/out.avi")
        assert spec.get('filename') == "C:/clips/out.avi"

    def test_get_with_default(self):
        from vstab.outputs import OutputSpec

        spec = OutputSpec("compare")
        assert spec.get('missing', 'default') == 'default'
        assert spec.get_int('missing', 3) == 3

    def test_get_int(self):
        from vstab.outputs import OutputSpec

        spec = OutputSpec("frames=quality=80:dir=x")
        assert spec.get_int('quality') == 80
        with pytest.raises(ValueError, match="integer"):
            OutputSpec("video=fps=fast").get_int('fps')

    def test_empty_spec(self):
        from vstab.outputs import OutputSpec

        with pytest.raises(ValueError):
            OutputSpec("")


class TestOutputManager:
    """Tests for OutputManager."""

    def test_add_output(self):
        """Test adding outputs."""
        from vstab.outputs import OutputManager

        manager = OutputManager("input.mp4")
        manager.add_output("video")
        manager.add_output("compare=filename=side.avi")

        assert len(manager) == 2
        assert [p.name for p in manager.get_output_paths()] == [
            "input_stabilized.avi", "side.avi",
        ]

    def test_invalid_output_type(self):
        """Test that invalid output type raises error."""
        from vstab.outputs import OutputManager

        manager = OutputManager("input.mp4")
        with pytest.raises(ValueError):
            manager.add_output("previewtrack")

    def test_invalid_frames_source(self):
        from vstab.outputs import OutputManager

        manager = OutputManager("input.mp4")
        with pytest.raises(ValueError):
            manager.add_output("frames=source=overlay")

    def test_frame_sequence(self, tmp_path):
        """Frames are written as numbered JPEGs."""
        from vstab.outputs import OutputManager

        manager = OutputManager("input.mp4")
        output = manager.add_output(f"frames=dir={tmp_path / 'images'}")

        frame = np.full((40, 60, 3), 128, dtype=np.uint8)
        with manager:
            manager.initialize_all({'width': 60, 'height': 40, 'fps': 25.0})
            manager.process_frame(0, frame, frame)
            manager.process_frame(1, frame, frame)

        assert [p.name for p in output.written] == ["00000000.jpg", "00000001.jpg"]
        assert all(p.exists() for p in output.written)

    def test_numeric_options(self):
        """fps and quality options are parsed and range checked."""
        from vstab.outputs import OutputManager

        manager = OutputManager("input.mp4")
        assert manager.add_output("video=fps=24").fps == 24
        assert manager.add_output("compare").fps == 0
        assert manager.add_output("frames=quality=70").quality == 70

        with pytest.raises(ValueError):
            manager.add_output("frames=quality=101")
        with pytest.raises(ValueError):
            manager.add_output("video=fps=-5")


class TestSideBySide:
    """Tests for the comparison canvas."""

    def test_layout(self):
        from vstab.outputs.video import side_by_side, compare_size

        original = np.full((20, 30, 3), 10, dtype=np.uint8)
        stabilized = np.full((20, 30, 3), 200, dtype=np.uint8)
        canvas = side_by_side(original, stabilized)

        assert canvas.shape == (20, 70, 3)
        assert (canvas[:, :30] == 10).all()
        assert (canvas[:, 30:40] == 0).all()
        assert (canvas[:, 40:] == 200).all()
        assert compare_size(30, 20) == (70, 20)

    def test_wide_canvas_is_halved(self):
        from vstab.outputs.video import side_by_side, compare_size

        frame = np.zeros((100, 1000, 3), dtype=np.uint8)
        canvas = side_by_side(frame, frame)
        assert canvas.shape[:2] == (50, 1005)
        assert compare_size(1000, 100) == (1005, 50)


class TestRenderer:
    """Tests for CorrectionRenderer."""

    def test_transform_matrix(self):
        from vstab.processing import transform_matrix
        from vstab.trajectory import MotionSample

        m = transform_matrix(MotionSample(5.0, -2.0, math.pi / 2))
        np.testing.assert_allclose(m, [[0, -1, 5], [1, 0, -2]], atol=1e-12)

    def test_crop_borders(self):
        from vstab.processing import crop_borders

        # int(480 * 0.25) = 120, 120 * 480 // 640 = 90
        assert crop_borders(640, 480, 70, 0.25) == (70, 90)

    def test_identity_keeps_shape_and_content(self):
        from vstab.processing import CorrectionRenderer
        from vstab.trajectory import MotionSample

        frame = np.full((100, 200, 3), 77, dtype=np.uint8)
        out = CorrectionRenderer().render(frame, MotionSample(0.0, 0.0, 0.0))

        assert out.shape == frame.shape
        assert (out == 77).all()

    def test_crop_too_large(self):
        from vstab.processing import CorrectionRenderer
        from vstab.trajectory import MotionSample

        frame = np.zeros((100, 120, 3), dtype=np.uint8)
        with pytest.raises(ValueError, match="too large"):
            CorrectionRenderer(horizontal_border_crop=70).render(frame, MotionSample(0, 0, 0))

    def test_invalid_settings(self):
        from vstab.processing import CorrectionRenderer

        with pytest.raises(ValueError):
            CorrectionRenderer(horizontal_border_crop=-1)
        with pytest.raises(ValueError):
            CorrectionRenderer(border_crop_ratio=1.5)

    def test_satisfies_protocol(self):
        from vstab.core.base import FrameRenderer
        from vstab.processing import CorrectionRenderer

        assert isinstance(CorrectionRenderer(), FrameRenderer)


def textured_canvas(height=280, width=360, seed=3):
    """Blurred noise with plenty of trackable corners."""
    import cv2

    rng = np.random.default_rng(seed)
    canvas = rng.integers(0, 255, size=(height, width), dtype=np.uint8)
    canvas = cv2.GaussianBlur(canvas, (0, 0), 3)
    return cv2.normalize(canvas, None, 0, 255, cv2.NORM_MINMAX)


def shifted_pair():
    """Two greyscale views of one canvas, content moving by (+4, +3)."""
    canvas = textured_canvas()
    return canvas[20:260, 20:340], canvas[17:257, 16:336]


def write_test_video(path, n_frames=12, width=320, height=240):
    """Write a short MJPG clip of a canvas drifting right with some jitter."""
    import cv2

    canvas = cv2.cvtColor(textured_canvas(height + 40, width + 60), cv2.COLOR_GRAY2BGR)
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 25.0, (width, height))
    assert writer.isOpened()
    for i in range(n_frames):
        x = 30 - 2 * i
        y = 20 + (3 if i % 2 else -3)
        writer.write(np.ascontiguousarray(canvas[y:y + height, x:x + width]))
    writer.release()
    return path


class ScriptedEstimator:
    """Returns queued results, None meaning failure."""

    name = "scripted"

    def __init__(self, results):
        self.results = list(results)
        self.calls = 0

    def estimate(self, prev_gray, cur_gray):
        self.calls += 1
        return self.results.pop(0)


class TestCollectMotion:
    """Tests for collect_motion."""

    def frames(self, n):
        return [np.zeros((8, 8), dtype=np.uint8) for _ in range(n)]

    def test_one_sample_per_pair(self):
        from vstab.estimation import collect_motion
        from vstab.trajectory import MotionSample

        results = [MotionSample(1.0, 0.0, 0.0), MotionSample(2.0, 0.0, 0.0), MotionSample(3.0, 0.0, 0.0)]
        collection = collect_motion(self.frames(4), ScriptedEstimator(results))

        assert [s.dx for s in collection.samples] == [1.0, 2.0, 3.0]
        assert collection.frames_read == 4
        assert collection.reused == []

    def test_failed_pair_reuses_previous(self):
        """A failed estimate repeats the last good sample and is recorded."""
        from vstab.estimation import collect_motion
        from vstab.trajectory import MotionSample

        good = MotionSample(1.0, 2.0, 0.1)
        collection = collect_motion(self.frames(4), ScriptedEstimator([good, None, None]))

        assert collection.samples == [good, good, good]
        assert collection.reused == [1, 2]

    def test_failure_before_any_success_is_identity(self):
        from vstab.estimation import collect_motion
        from vstab.trajectory import MotionSample

        collection = collect_motion(self.frames(2), ScriptedEstimator([None]))
        assert collection.samples == [MotionSample(0.0, 0.0, 0.0)]
        assert collection.reused == [0]

    def test_frame_cap(self):
        from vstab.estimation import collect_motion
        from vstab.trajectory import MotionSample

        estimator = ScriptedEstimator([MotionSample(1.0, 0.0, 0.0)] * 9)
        collection = collect_motion(self.frames(10), estimator, frame_cap=3)

        assert len(collection) == 3
        assert collection.frames_read == 4
        assert estimator.calls == 3

    def test_bgr_frames_converted(self):
        from vstab.estimation import to_gray

        gray = to_gray(np.zeros((6, 9, 3), dtype=np.uint8))
        assert gray.shape == (6, 9)


class TestEstimators:
    """Tests for the OpenCV motion estimators."""

    def test_registry(self):
        from vstab.estimation import create_estimator, SparseLKEstimator, FarnebackEstimator

        assert isinstance(create_estimator("lk_sparse"), SparseLKEstimator)
        assert isinstance(create_estimator("1"), SparseLKEstimator)
        assert isinstance(create_estimator("3"), FarnebackEstimator)
        with pytest.raises(ValueError):
            create_estimator("phase_correlation")

    def test_rigid_motion_from_matrix(self):
        from vstab.estimation import rigid_motion_from_matrix

        angle = 0.2
        matrix = np.array([
            [math.cos(angle), -math.sin(angle), 4.0],
            [math.sin(angle), math.cos(angle), -3.0],
        ])
        sample = rigid_motion_from_matrix(matrix)
        assert sample.dx == 4.0
        assert sample.dy == -3.0
        assert sample.da == pytest.approx(angle)

    def test_mean_flow_motion(self):
        from vstab.estimation import mean_flow_motion

        flow = np.zeros((4, 5, 2), dtype=np.float32)
        flow[..., 0] = 2.0
        flow[..., 1] = -1.0
        sample = mean_flow_motion(flow)
        assert sample.dx == pytest.approx(2.0)
        assert sample.dy == pytest.approx(-1.0)
        assert sample.da == 0.0

    def test_sparse_lk_recovers_shift(self):
        """A pure translation of a textured image is recovered."""
        from vstab.estimation import SparseLKEstimator

        prev, cur = shifted_pair()
        sample = SparseLKEstimator().estimate(prev, cur)
        assert sample is not None
        assert sample.dx == pytest.approx(4.0, abs=0.5)
        assert sample.dy == pytest.approx(3.0, abs=0.5)
        assert sample.da == pytest.approx(0.0, abs=0.02)

    def test_farneback_recovers_shift(self):
        """Mean Farneback flow follows a pure translation."""
        from vstab.estimation import FarnebackEstimator

        prev, cur = shifted_pair()
        sample = FarnebackEstimator().estimate(prev, cur)
        assert sample.dx == pytest.approx(4.0, abs=0.75)
        assert sample.dy == pytest.approx(3.0, abs=0.75)
        assert sample.da == 0.0

    def test_dense_lk_recovers_shift(self):
        import cv2
        from vstab.estimation import DenseLKEstimator

        if not hasattr(cv2, "optflow"):
            pytest.skip("OpenCV built without the optflow module")

        prev, cur = shifted_pair()
        sample = DenseLKEstimator().estimate(prev, cur)
        assert sample.dx == pytest.approx(4.0, abs=0.75)
        assert sample.dy == pytest.approx(3.0, abs=0.75)
        assert sample.da == 0.0

    def test_dense_lk_needs_optflow(self, monkeypatch):
        import cv2
        from vstab.estimation import DenseLKEstimator

        monkeypatch.delattr(cv2, "optflow", raising=False)
        with pytest.raises(RuntimeError, match="optflow"):
            DenseLKEstimator()

    def test_sparse_lk_blank_frame(self):
        """No corners means no estimate."""
        from vstab.estimation import SparseLKEstimator

        blank = np.zeros((60, 80), dtype=np.uint8)
        assert SparseLKEstimator().estimate(blank, blank) is None


class TestMotionIO:
    """Tests for motion dump files."""

    def test_parse_line(self):
        from vstab.trajectory.motion_io import parse_motion_line

        assert parse_motion_line("3 1.5 -0.25 1e-3") == (3, 1.5, -0.25, 0.001)
        assert parse_motion_line("  ") is None
        assert parse_motion_line("frame dx dy da") is None

    def test_parse_non_finite(self):
        from vstab.trajectory.motion_io import parse_motion_line

        idx, dx, dy, da = parse_motion_line("1 nan -inf 0")
        assert math.isnan(dx)
        assert dy == -math.inf

    def test_write_then_read(self, tmp_path):
        from vstab.trajectory import read_motion_file, write_motion_file

        values = [(0.1, -2.0, 0.003), (1.0 / 3.0, 4.5, -0.25)]
        path = write_motion_file(tmp_path / "motion.txt", values)

        assert path.read_text().splitlines()[0].startswith("1 ")
        assert read_motion_file(path) == values

    def test_malformed_lines_skipped(self, tmp_path):
        from vstab.trajectory import read_motion_file

        path = tmp_path / "motion.txt"
        path.write_text("2 1 1 0\n# comment\n1 0.5 0 0\n\n")
        assert read_motion_file(path) == [(0.5, 0.0, 0.0), (1.0, 1.0, 0.0)]

    def test_missing_file(self, tmp_path):
        from vstab.trajectory import read_motion_file

        with pytest.raises(FileNotFoundError):
            read_motion_file(tmp_path / "nope.txt")

    def test_write_diagnostics(self, tmp_path):
        from vstab.trajectory import MotionSample, stabilize_motion, write_diagnostics

        result = stabilize_motion([MotionSample(1.0, 0.0, 0.0)] * 4, radius=1)
        paths = write_diagnostics(result, tmp_path / "diag")

        assert sorted(p.name for p in paths) == [
            "new_prev_to_cur_transformation.txt",
            "prev_to_cur_transformation.txt",
            "smoothed_trajectory.txt",
            "trajectory.txt",
        ]
        assert all(len(p.read_text().splitlines()) == 4 for p in paths)


class TestStabilizeVideo:
    """Tests for the two-pass driver on a short synthetic clip."""

    def test_two_pass_run(self, tmp_path):
        from vstab.core.config import StabilizerConfig
        from vstab.core.video import VideoReader
        from vstab.pipeline import stabilize_video

        source = write_test_video(tmp_path / "shaky.avi", n_frames=12)
        output = tmp_path / "steady.avi"
        config = StabilizerConfig(
            smoothing_radius=3,
            method="farneback",
            outputs=[f"video=filename={output}"],
        )

        report = stabilize_video(source, config, diagnostics_dir=tmp_path / "diag")

        # 12 frames read, one transform per pair, last frame not rendered
        assert len(report.result) == 11
        assert report.frames_rendered == 11
        assert report.reused == []
        assert report.output_paths == [output]
        assert set(report.timings) == {
            'optical_flow', 'trajectory', 'smoothing', 'generating', 'transform', 'total',
        }
        assert len(report.diagnostic_paths) == 4

        with VideoReader(output) as reader:
            props = reader.properties
            frames = [frame for _, frame in reader]
        assert len(frames) == 11
        assert (props.width, props.height) == (320, 240)

    def test_frame_cap_limits_run(self, tmp_path):
        from vstab.core.config import StabilizerConfig
        from vstab.pipeline import stabilize_video

        source = write_test_video(tmp_path / "shaky.avi", n_frames=12)
        config = StabilizerConfig(
            smoothing_radius=2,
            frame_cap=5,
            method="farneback",
            outputs=[f"frames=dir={tmp_path / 'images'}"],
        )

        report = stabilize_video(source, config)

        assert len(report.result) == 5
        assert report.frames_rendered == 5
        assert sorted(p.name for p in (tmp_path / "images").iterdir()) == [
            f"{k:08d}.jpg" for k in range(5)
        ]

    def test_invalid_config_fails_before_reading(self, tmp_path):
        from vstab.core.config import StabilizerConfig
        from vstab.pipeline import stabilize_video

        with pytest.raises(ValueError, match="Unknown smoothing method"):
            stabilize_video(tmp_path / "missing.avi", StabilizerConfig(smoothing_method="median"))


class TestCLI:
    """Tests for the command line."""

    def test_version(self, capsys):
        from vstab.__main__ import main

        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "vstab" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        from vstab.__main__ import main

        assert main([]) == 0
        assert "stabilize" in capsys.readouterr().out

    def test_smooth(self, tmp_path):
        """The smooth command reproduces the three-frame example."""
        from vstab.__main__ import main
        from vstab.trajectory import read_motion_file

        motion = tmp_path / "prev_to_cur_transformation.txt"
        motion.write_text("1 1 0 0\n2 1 0 0\n3 1 0 0\n")
        out = tmp_path / "new.txt"

        assert main(["smooth", str(motion), "-r", "1", "-o", str(out), "-q"]) == 0

        dx = [row[0] for row in read_motion_file(out)]
        assert dx == pytest.approx([1.5, 0.5, 0.5])

    def test_smooth_empty_file(self, tmp_path, capsys):
        from vstab.__main__ import main

        motion = tmp_path / "empty.txt"
        motion.write_text("")

        assert main(["smooth", str(motion), "-q"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_stabilize_missing_input(self, tmp_path, capsys):
        from vstab.__main__ import main

        assert main(["stabilize", str(tmp_path / "missing.mp4"), "-q"]) == 1
        assert "not found" in capsys.readouterr().err

    def test_stabilize(self, tmp_path, capsys):
        from vstab.__main__ import main

        source = write_test_video(tmp_path / "shaky.avi", n_frames=8)
        output = tmp_path / "side.avi"

        argv = ["stabilize", str(source), "-m", "3", "-r", "2", "-out", f"compare=filename={output}", "-q"]
        assert main(argv) == 0
        assert output.exists()
        assert "Total Time" in capsys.readouterr().out

    def test_config(self, tmp_path):
        from vstab.__main__ import main
        from vstab.core.config import load_config

        path = tmp_path / "cfg.json"
        assert main(["config", "-o", str(path)]) == 0
        assert load_config(path).smoothing_radius == 50


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
