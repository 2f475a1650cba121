"""
Tests for template loading and the pixel template recognizer.
"""

import logging

import numpy as np
import pytest
from PIL import Image

from meter_ocr import (
    DEFAULT_PARAMS,
    FingerprintParams,
    NoTemplatesError,
    PixelTemplateRecognizer,
    TemplateSet,
    UnsupportedImageError,
    available_recognizers,
    create_recognizer,
    create_template,
    load_templates,
    register_recognizer,
)
from meter_ocr.base import DigitRecognizer
from meter_ocr.result import Recognition

from conftest import DIGIT_STROKES, draw_digit


def test_load_all_templates(template_dir):
    templates = load_templates(template_dir)

    assert templates.labels == ("0", "1", "3", "4", "7", "8")
    assert len(templates) == len(DIGIT_STROKES)
    assert templates.params == DEFAULT_PARAMS
    for label in templates:
        assert templates[label].shape == (12600,)


def test_missing_templates_warn(template_dir, caplog):
    with caplog.at_level(logging.WARNING, logger="meter_ocr.templates"):
        load_templates(template_dir)

    missing = {"2", "5", "6", "9"}
    warned = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warned) == len(missing)
    for label in missing:
        assert any(f"Template {label} not found" in message for message in warned)


def test_empty_directory_fails(tmp_path):
    with pytest.raises(NoTemplatesError):
        load_templates(tmp_path)


def test_nonexistent_directory_fails(tmp_path):
    with pytest.raises(NoTemplatesError):
        load_templates(tmp_path / "nope")


def test_other_extensions(tmp_path):
    draw_digit("7").save(tmp_path / "7.bmp")

    with pytest.raises(NoTemplatesError):
        load_templates(tmp_path)

    templates = load_templates(tmp_path, extensions=(".png", ".bmp"))
    assert templates.labels == ("7",)


def test_template_set_is_read_only(template_dir):
    templates = load_templates(template_dir)

    with pytest.raises(TypeError):
        templates["2"] = templates["3"]
    with pytest.raises(ValueError):
        templates["3"][0] = 1.0


def test_template_set_rejects_wrong_length():
    with pytest.raises(ValueError):
        TemplateSet({"1": np.zeros(100)}, DEFAULT_PARAMS)


def test_template_matches_query_normalization():
    """Templates and queries share one normalization routine."""
    image = draw_digit("4")
    recognizer = PixelTemplateRecognizer(TemplateSet({"4": create_template(image)}))

    analysis = recognizer.analyze(image)

    assert np.array_equal(analysis.fingerprint, recognizer.templates["4"])


@pytest.mark.parametrize("label", sorted(DIGIT_STROKES))
def test_recognize_shifted_digit(template_dir, label):
    """Origin detection compensates for the digit's position in the crop."""
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))

    result = recognizer.recognize(draw_digit(label, offset=(37, 35)))

    assert result.label == label
    assert result.confidence == pytest.approx(1.0)
    assert result.origin == (27, 25)
    assert result.is_match
    assert list(result.scores) == list(recognizer.templates)


def test_recognize_other_encodings(template_dir):
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))

    for mode in ("RGBA", "P", "L"):
        result = recognizer.recognize(draw_digit("8", mode=mode))
        assert result.label == "8", mode


def test_recognize_contrast_invariant(template_dir):
    """Min/max normalization makes a dimmer rendering match the same template."""
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))

    result = recognizer.recognize(draw_digit("1", ink=180, background=40))

    assert result.label == "1"
    assert result.confidence == pytest.approx(1.0)


def test_recognize_unsupported_image(template_dir):
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))
    with pytest.raises(UnsupportedImageError):
        recognizer.recognize(draw_digit("1").convert("CMYK"))


def test_recognize_blank_crop(template_dir):
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))

    result = recognizer.recognize(Image.new("RGB", (150, 200), (90, 90, 90)))

    assert result.origin == (0, 0)
    assert result.label == "?"
    assert result.confidence == -1.0
    assert not result.is_match


def test_match_analysis_agrees_with_recognize(template_dir):
    recognizer = PixelTemplateRecognizer(load_templates(template_dir))
    image = draw_digit("7", offset=(37, 29))

    analysis = recognizer.analyze(image)
    result = recognizer.match_analysis(analysis)

    assert result == recognizer.recognize(image)
    assert result.origin == analysis.origin
    assert result.scores[result.label] == result.confidence


def test_query_uses_template_params(tmp_path):
    params = FingerprintParams(template_width=70, template_height=120)
    draw_digit("0").save(tmp_path / "0.png")

    recognizer = PixelTemplateRecognizer(load_templates(tmp_path, params))

    assert recognizer.analyze(draw_digit("0")).fingerprint.shape == (70 * 120,)
    assert recognizer.recognize(draw_digit("0")).label == "0"


def test_factory_creates_pixel_recognizer(template_dir):
    recognizer = create_recognizer("pixel", template_dir=template_dir)

    assert isinstance(recognizer, PixelTemplateRecognizer)
    assert recognizer.name == "pixel"
    assert recognizer.recognize(draw_digit("7")).label == "7"


def test_factory_unknown_type(template_dir):
    with pytest.raises(ValueError, match="Unknown recognizer type"):
        create_recognizer("tesseract", template_dir=template_dir)


def test_factory_missing_templates(tmp_path):
    with pytest.raises(NoTemplatesError):
        create_recognizer(template_dir=tmp_path)


def test_register_recognizer(tmp_path):
    class ConstantRecognizer(DigitRecognizer):
        def __init__(self, template_dir):
            self.template_dir = template_dir

        @property
        def name(self) -> str:
            return "constant"

        def recognize(self, image):
            return Recognition(label="0", confidence=1.0)

    register_recognizer("constant", ConstantRecognizer)

    assert "constant" in available_recognizers()
    recognizer = create_recognizer("constant", template_dir=tmp_path)
    assert recognizer.template_dir == tmp_path
    assert recognizer.recognize(None).label == "0"

    with pytest.raises(TypeError):
        register_recognizer("bogus", int)
