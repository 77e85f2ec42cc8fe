# test_decoding.py
import cv2
import numpy as np
import pytest

from wayfinding import OpenCVQRDecoder, PayloadDecoderAdapter, Region
from conftest import ScriptedDecoder


def test_adapter_crops_padded_region(blank_frame):
    decoder = ScriptedDecoder(['R_ENTR'])
    adapter = PayloadDecoderAdapter(decoder)
    payload = adapter.decode(blank_frame, Region(100, 100, 200, 150), now=1.5, padding_ratio=0.12)
    assert decoder.calls == [(236, 186)]
    assert payload.text == 'R_ENTR'
    assert payload.timestamp == 1.5


def test_adapter_without_padding_uses_exact_region(blank_frame):
    decoder = ScriptedDecoder(['X'])
    PayloadDecoderAdapter(decoder).decode(blank_frame, Region(160, 80, 320, 320), now=0.0)
    assert decoder.calls == [(320, 320)]


def test_adapter_clamps_region_to_frame(blank_frame):
    decoder = ScriptedDecoder(['X'])
    PayloadDecoderAdapter(decoder).decode(blank_frame, Region(600, 450, 100, 100), now=0.0)
    assert decoder.calls == [(40, 30)]


def test_adapter_trims_payload(blank_frame):
    adapter = PayloadDecoderAdapter(ScriptedDecoder(['  R_WALKWAY \n']))
    assert adapter.decode(blank_frame, Region(0, 0, 50, 50), now=0.0).text == 'R_WALKWAY'


@pytest.mark.parametrize('raw', [None, '', '   '])
def test_adapter_none_found(blank_frame, raw):
    adapter = PayloadDecoderAdapter(ScriptedDecoder([raw]))
    assert adapter.decode(blank_frame, Region(0, 0, 50, 50), now=0.0) is None


def test_adapter_does_not_modify_frame(blank_frame):
    before = blank_frame.copy()
    PayloadDecoderAdapter(ScriptedDecoder(['X'])).decode(blank_frame, Region(10, 10, 50, 50), 0.0, 0.12)
    assert np.array_equal(before, blank_frame)


class StubDetector:
    def __init__(self, answers):
        self.answers = list(answers)
        self.images = []

    def detectAndDecode(self, img):
        self.images.append(img.copy())
        return self.answers.pop(0), None, None


def test_qr_decoder_retries_inverted_polarity():
    decoder = OpenCVQRDecoder(try_inverted=True)
    decoder.detector = StubDetector(['', 'B_DESK'])
    pixels = np.full((40, 40, 3), 30, dtype=np.uint8)
    assert decoder.decode(pixels, 40, 40) == 'B_DESK'
    first, second = decoder.detector.images
    assert first.ndim == 2
    assert np.array_equal(second, 255 - first)


def test_qr_decoder_single_polarity():
    decoder = OpenCVQRDecoder(try_inverted=False)
    decoder.detector = StubDetector(['', 'never'])
    assert decoder.decode(np.zeros((40, 40), dtype=np.uint8), 40, 40) is None
    assert len(decoder.detector.images) == 1


def test_qr_decoder_empty_buffer():
    assert OpenCVQRDecoder().decode(np.zeros((0, 0, 3), dtype=np.uint8), 0, 0) is None


def _qr_image(text):
    qr = cv2.QRCodeEncoder.create().encode(text)
    qr = cv2.resize(qr, None, fx=8, fy=8, interpolation=cv2.INTER_NEAREST)
    qr = cv2.copyMakeBorder(qr, 40, 40, 40, 40, cv2.BORDER_CONSTANT, value=255)
    return cv2.cvtColor(qr, cv2.COLOR_GRAY2BGR)


@pytest.mark.skipif(not hasattr(cv2, 'QRCodeEncoder'), reason='OpenCV build without QR encoder')
def test_qr_decoder_reads_real_code():
    img = _qr_image('R_ENTR')
    h, w = img.shape[:2]
    assert OpenCVQRDecoder().decode(img, w, h) == 'R_ENTR'


@pytest.mark.skipif(not hasattr(cv2, 'QRCodeEncoder'), reason='OpenCV build without QR encoder')
def test_qr_decoder_reads_inverted_code():
    img = cv2.bitwise_not(_qr_image('G_CAFE'))
    h, w = img.shape[:2]
    assert OpenCVQRDecoder(try_inverted=True).decode(img, w, h) == 'G_CAFE'
