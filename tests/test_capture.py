"""Tests for the live face collection session."""

import cv2
import numpy as np
import pytest

from facedb.constants import CaptureConfig, Settings
from facedb.dataset import load_dataset
from facedb.recognition import FaceModel
from facedb.sessions import (
    CaptureSession,
    CaptureSessionConfig,
    Intent,
    run_capture_session,
    validate_person_name,
)
from helpers import FakeCamera, FakeDetector, FakeModel, FakePreview, face_pattern, frame_with_face

CLOCK = 1700000000.0

# Box at detection resolution (320x240); maps to (100, 100, 64, 64) in a 640x480 frame
DETECT_BOX = (50, 50, 32, 32)


def _frame():
    return frame_with_face(face_pattern("carol", seed=0), position=(100, 100), frame_size=(640, 480))


def _session(root, detector, model=None, settings=None, name="carol"):
    dataset = load_dataset(root)
    config = CaptureSessionConfig(cascade_path="unused.xml", data_path=root, device_id=0, person_name=name)
    session = CaptureSession(config, detector, model or FakeModel(), dataset,
                             settings=settings, clock=lambda: CLOCK)
    session.prepare_directories()
    return session


class TestCaptureSession:
    """Test cases for CaptureSession enrollment."""

    def test_enroll_new_person(self, face_database):
        """A first sample for a new name adds one label and retrains on everything."""
        root, _ = face_database
        model = FakeModel()
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]), model)

        session.request(Intent.ENROLL_FACE)
        results = session.process_frame(_frame())

        assert results[0].bbox == (100, 100, 64, 64)
        assert len(session.dataset) == 7
        assert len(session.dataset.distinct_labels) == 3
        assert session.dataset.registry.label_for("carol") == 2
        assert model.trained_sizes == [7]
        assert model.registry.name_for(2) == "carol"

        saved = root / "faces" / "carol" / "1700000000_0.jpg"
        assert session.saved_paths == [saved]
        assert cv2.imread(str(saved), cv2.IMREAD_GRAYSCALE).shape == (64, 64)
        assert not session.pending

    def test_existing_person_keeps_label(self, face_database):
        root, _ = face_database
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]), name="alice")

        session.request(Intent.ENROLL_FACE)
        session.process_frame(_frame())

        assert session.dataset.labels.count(0) == 4
        assert len(session.dataset.distinct_labels) == 2

    def test_pending_intent_waits_for_a_face(self, face_database):
        root, _ = face_database
        model = FakeModel()
        detector = FakeDetector(per_call=[[], [], [DETECT_BOX]])
        session = _session(root, detector, model)

        session.request(Intent.ENROLL_FACE)
        session.process_frame(_frame())
        session.process_frame(_frame())

        assert Intent.ENROLL_FACE in session.pending
        assert model.trained_sizes == []

        session.process_frame(_frame())

        assert not session.pending
        assert model.trained_sizes == [7]

    def test_first_face_is_enrolled(self, face_database):
        root, _ = face_database
        detector = FakeDetector(boxes=[DETECT_BOX, (200, 150, 40, 40)])
        session = _session(root, detector)

        session.request(Intent.ENROLL_FACE)
        session.process_frame(_frame())

        assert len(session.saved_paths) == 1
        assert len(session.dataset) == 7

    def test_enroll_portrait(self, face_database):
        """Portraits are cut from the full frame and do not retrain."""
        root, _ = face_database
        model = FakeModel()
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]), model)

        session.request(Intent.ENROLL_PORTRAIT)
        session.process_frame(_frame())

        saved = root / "protraits" / "carol" / "1700000000_0.jpg"
        assert session.saved_paths == [saved]
        assert cv2.imread(str(saved)).shape == (256, 256, 3)
        assert model.trained_sizes == []
        assert len(session.dataset) == 6

    def test_sequence_is_shared(self, face_database):
        root, _ = face_database
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]))

        session.request(Intent.ENROLL_FACE)
        session.request(Intent.ENROLL_PORTRAIT)
        session.process_frame(_frame())

        assert [p.name for p in session.saved_paths] == ["1700000000_0.jpg", "1700000000_1.jpg"]
        assert session.saved_paths[0].parent.name == "carol"
        assert session.saved_paths[1].parent.parent.name == "protraits"

    @pytest.mark.parametrize("key,intent", [
        (27, Intent.EXIT),
        (ord("q"), Intent.EXIT),
        (ord("p"), Intent.ENROLL_PORTRAIT),
        (ord(" "), Intent.ENROLL_FACE),
        (ord("x"), None),
        (-1, None),
    ])
    def test_handle_key(self, face_database, key, intent):
        root, _ = face_database
        session = _session(root, FakeDetector())

        assert session.handle_key(key) is intent
        assert session.exit_requested == (intent is Intent.EXIT)

    def test_run_loop(self, face_database):
        root, _ = face_database
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]))
        camera = FakeCamera([_frame()])
        preview = FakePreview([ord(" "), -1, 27])

        session.run(camera, preview)

        assert camera.opened and camera.released
        assert preview.closed
        assert len(preview.shown) == 3
        assert len(session.saved_paths) == 1

    def test_render_does_not_modify_frame(self, face_database):
        root, _ = face_database
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]))
        frame = _frame()
        original = frame.copy()

        rendered = session.render(frame, session.process_frame(frame))

        assert np.array_equal(frame, original)
        assert not np.array_equal(rendered, original)

    def test_background_retraining(self, face_database):
        root, _ = face_database
        settings = Settings(capture=CaptureConfig(retrain="background"))
        model = FaceModel(backend="fisher")
        model.train(load_dataset(root))
        session = _session(root, FakeDetector(boxes=[DETECT_BOX]), model, settings=settings)

        session.request(Intent.ENROLL_FACE)
        session.process_frame(_frame())

        assert session.trainer is not None
        assert session.trainer.wait(10)
        assert model.version == 2
        assert model.registry.name_for(2) == "carol"


class TestRunCaptureSession:
    """Test cases for run_capture_session."""

    def test_empty_database(self, tmp_path):
        """An empty database starts detection-only and keeps enrolling."""
        config = CaptureSessionConfig(cascade_path="unused.xml", data_path=tmp_path,
                                      device_id=0, person_name="alice")
        camera = FakeCamera([_frame()])
        preview = FakePreview([ord(" "), ord(" "), 27])

        session = run_capture_session(
            config,
            detector=FakeDetector(boxes=[DETECT_BOX]),
            model=FaceModel(backend="fisher"),
            camera=camera,
            preview=preview,
        )

        assert (tmp_path / "protraits" / "alice").is_dir()
        assert len(list((tmp_path / "faces" / "alice").iterdir())) == 2
        assert len(session.dataset) == 2
        assert not session.model.is_trained
        assert camera.released

    def test_invalid_name(self, tmp_path):
        config = CaptureSessionConfig(cascade_path="unused.xml", data_path=tmp_path,
                                      device_id=0, person_name="a b")

        with pytest.raises(ValueError):
            run_capture_session(config, detector=FakeDetector(), camera=FakeCamera([_frame()]))

        assert not (tmp_path / "faces").exists()


class TestValidatePersonName:
    """Test cases for validate_person_name."""

    def test_valid(self):
        assert validate_person_name("  alice ") == "alice"

    @pytest.mark.parametrize("name", ["", "   ", "a b", ".hidden", "a/b"])
    def test_invalid(self, name):
        with pytest.raises(ValueError):
            validate_person_name(name)
