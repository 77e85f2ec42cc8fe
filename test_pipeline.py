# test_pipeline.py
import numpy as np

from config import ColorBand, PipelineConfig
from pipeline import ScanPipeline
from wayfinding import ColorSegmenter, FixedWindowSelector, ScanState
from wayfinding.region_selection import BlobTrackingSelector
from conftest import ScriptedDecoder, frame_with_patch

STATUS = PipelineConfig.STATUS


def fixed_pipeline(graph, decoder):
    return ScanPipeline(graph, decoder=decoder, selector=FixedWindowSelector())


def blob_pipeline(graph, decoder):
    segmenter = ColorSegmenter()
    return ScanPipeline(graph, decoder=decoder,
                        selector=BlobTrackingSelector(segmenter), segmenter=segmenter)


def run_ticks(pipeline, frame, payload_count, state=None, step=0.3):
    state = state or ScanState()
    messages = []
    for i in range(payload_count):
        state, result = pipeline.process_frame(frame, state, now=i * step)
        if result.message is not None:
            messages.append(result.message)
    return state, messages


def test_repeated_payload_notifies_once(graph, blank_frame):
    pipeline = fixed_pipeline(graph, ScriptedDecoder(['R_ENTR', 'R_ENTR']))
    state, messages = run_ticks(pipeline, blank_frame, 2)
    assert len(messages) == 1
    assert state.last_decoded == 'R_ENTR'


def test_interrupted_repeat_notifies_again(graph, blank_frame):
    pipeline = fixed_pipeline(graph, ScriptedDecoder(['R_ENTR', 'R_WALKWAY', 'R_ENTR']))
    _, messages = run_ticks(pipeline, blank_frame, 3)
    assert [m.display_text for m in messages] == ['Block N Entrance', 'Walkway', 'Block N Entrance']


def test_burst_of_frames_decodes_once(graph, blank_frame):
    decoder = ScriptedDecoder(['R_ENTR'] * 20)
    pipeline = fixed_pipeline(graph, decoder)
    state = ScanState()
    for i in range(10):
        state, _ = pipeline.process_frame(blank_frame, state, now=5.0 + i * 0.005)
    assert len(decoder.calls) == 1

    state, _ = pipeline.process_frame(blank_frame, state, now=5.0 + 0.25)
    assert len(decoder.calls) == 2


def test_busy_tick_leaves_status_alone(graph, blank_frame):
    pipeline = fixed_pipeline(graph, ScriptedDecoder([None, None]))
    state, first = pipeline.process_frame(blank_frame, ScanState(), now=0.0)
    assert first.status == STATUS['ACQUIRING']
    _, second = pipeline.process_frame(blank_frame, state, now=0.1)
    assert second.status is None
    assert second.message is None


def test_fixed_window_decodes_without_segmentation(graph, blank_frame):
    decoder = ScriptedDecoder(['ZZZ'])
    _, result = fixed_pipeline(graph, decoder).process_frame(blank_frame, ScanState(), now=0.0)
    assert decoder.calls == [(320, 320)]
    assert result.mask is None
    assert result.message.display_text == 'Unknown code: ZZZ'


def test_blob_policy_nothing_in_view(graph, blank_frame):
    decoder = ScriptedDecoder(['R_ENTR'])
    _, result = blob_pipeline(graph, decoder).process_frame(blank_frame, ScanState(), now=0.0)
    assert result.status == STATUS['SCANNING']
    assert result.region is None
    assert decoder.calls == []


def test_blob_policy_move_closer(graph):
    decoder = ScriptedDecoder(['R_ENTR'])
    frame = frame_with_patch(300, 200, 60, 60)
    state, result = blob_pipeline(graph, decoder).process_frame(frame, ScanState(), now=0.0)
    assert result.status == STATUS['MOVE_CLOSER']
    assert result.region.width == 60
    assert decoder.calls == []
    assert not state.decode_in_flight(0.0)


def test_blob_policy_decodes_padded_blob(graph):
    decoder = ScriptedDecoder(['R_ENTR'])
    frame = frame_with_patch(100, 100, 200, 150)
    state, result = blob_pipeline(graph, decoder).process_frame(frame, ScanState(), now=0.0)
    assert decoder.calls == [(236, 186)]
    assert result.status == STATUS['DECODED']
    assert result.message.speech_text.endswith('Next, proceed to Walkway.')
    assert state.last_decoded == 'R_ENTR'


def test_blob_policy_ignores_other_colors(graph):
    decoder = ScriptedDecoder(['R_ENTR'])
    frame = frame_with_patch(100, 100, 200, 150, hsv=(60, 220, 220))
    _, result = blob_pipeline(graph, decoder).process_frame(frame, ScanState(), now=0.0)
    assert result.status == STATUS['SCANNING']
    assert decoder.calls == []


def test_mismatch_reported_for_selected_color(graph, blank_frame):
    pipeline = fixed_pipeline(graph, ScriptedDecoder(['R_ENTR']))
    state = ScanState(selected_color=ColorBand.BLUE)
    _, result = pipeline.process_frame(blank_frame, state, now=0.0)
    assert result.resolution.mismatched
    assert result.message.display_text == '[RED] Block N Entrance'


def test_decoder_failure_is_transient(graph, blank_frame):
    decoder = ScriptedDecoder(error=RuntimeError('decoder crashed'))
    pipeline = fixed_pipeline(graph, decoder)
    state, result = pipeline.process_frame(blank_frame, ScanState(), now=0.0)
    assert state.decode_in_flight(0.01)
    assert result.status is None and result.message is None

    decoder.error = None
    decoder.payloads = ['R_ENTR']
    state, result = pipeline.process_frame(blank_frame, state, now=0.01)
    assert result.message is None
    assert len(decoder.calls) == 1

    _, result = pipeline.process_frame(blank_frame, state, now=0.221)
    assert result.message.display_text == 'Block N Entrance'


def test_failing_decoder_still_throttled(graph, blank_frame):
    decoder = ScriptedDecoder(error=RuntimeError('decoder crashed'))
    pipeline = fixed_pipeline(graph, decoder)
    state = ScanState()
    for i in range(10):
        state, _ = pipeline.process_frame(blank_frame, state, now=i * 0.005)
    assert len(decoder.calls) == 1


def test_process_frame_does_not_modify_inputs(graph):
    frame = frame_with_patch(100, 100, 200, 150)
    before = frame.copy()
    state = ScanState()
    blob_pipeline(graph, ScriptedDecoder(['R_ENTR'])).process_frame(frame, state, now=0.0)
    assert np.array_equal(frame, before)
    assert state == ScanState()
