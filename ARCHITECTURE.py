"""
Architecture Diagram

Visual representation of the color-marker wayfinding pipeline.
"""

print(r"""
╔═══════════════════════════════════════════════════════════════════════════════╗
║                   COLOR MARKER WAYFINDING ARCHITECTURE                        ║
╚═══════════════════════════════════════════════════════════════════════════════╝

┌─────────────────────────────────────────────────────────────────────────────┐
│                              USER INTERFACE                                  │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  Live camera:                         Still images:                         │
│  ┌──────────────────┐                ┌────────────────────────┐            │
│  │ main.py          │                │ pipeline.py <dir>      │            │
│  │ r/g/b, q         │                │ --visualize            │            │
│  └──────────────────┘                └────────────────────────┘            │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘
                                       │
                                       ▼
┌─────────────────────────────────────────────────────────────────────────────┐
│                        SESSION (main.py: ScanSession)                        │
├─────────────────────────────────────────────────────────────────────────────┤
│  frame = camera.read()                                                       │
│  state, result = pipeline.process_frame(frame, state, now)                   │
│  result.message -> StatusBoard / Speaker / Haptics                           │
└─────────────────────────────────────────────────────────────────────────────┘
                                       │
                                       ▼
┌─────────────────────────────────────────────────────────────────────────────┐
│                       ONE TICK (pipeline.py: ScanPipeline)                   │
├─────────────────────────────────────────────────────────────────────────────┤
│      1. mask   = segmenter.segment(frame, state.selected_color)  [blob only] │
│      2. region = selector.select(frame.shape, mask)                          │
│         (blob policy: region.min_side > 0.18 * min(W, H) or "move closer")   │
│      3. state, ok = throttle.try_acquire(state, now)   [220 ms cooldown]     │
│      4. payload = adapter.decode(frame, region)        [12% padding]         │
│      5. state, new = throttle.accept_payload(state, payload)   [dedup]       │
│      6. resolution = graph.resolve(payload, state.selected_color)            │
│      7. message = guidance.build_message(resolution, selected_color)         │
└─────────────────────────────────────────────────────────────────────────────┘
                                       │
                                       ▼
┌─────────────────────────────────────────────────────────────────────────────┐
│                          CORE MODULES (wayfinding/)                          │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌──────────────────┐  ┌──────────────────┐  ┌──────────────────┐         │
│  │ ColorSegmenter   │  │ RegionSelector   │  │ DecoderAdapter   │         │
│  ├──────────────────┤  ├──────────────────┤  ├──────────────────┤         │
│  │ • HSV inRange    │  │ • Fixed window   │  │ • Pad + clamp    │         │
│  │ • Red wrap OR    │  │ • Largest blob   │  │ • QRCodeDetector │         │
│  │ • Open / close   │  │ • Proximity gate │  │ • Both polarities│         │
│  └──────────────────┘  └──────────────────┘  └──────────────────┘         │
│                                                                              │
│  ┌──────────────────┐  ┌──────────────────┐  ┌──────────────────┐         │
│  │ DecodeThrottle   │  │ WaypointGraph    │  │ GuidanceResolver │         │
│  ├──────────────────┤  ├──────────────────┤  ├──────────────────┤         │
│  │ • Idle / Busy    │  │ • Color partition│  │ • Unknown notice │         │
│  │ • Payload dedup  │  │ • Mismatch search│  │ • Next step text │         │
│  │ • ScanState      │  │ • Load validation│  │ • Mismatch warn  │         │
│  └──────────────────┘  └──────────────────┘  └──────────────────┘         │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘
                                       │
                                       ▼
┌─────────────────────────────────────────────────────────────────────────────┐
│                     CONFIGURATION (config.py, data/)                         │
├─────────────────────────────────────────────────────────────────────────────┤
│  COLOR_BANDS        HSV ranges per ColorBand (red has two)                   │
│  PipelineConfig     SEGMENTATION, REGION, DECODER, THROTTLE, GUIDANCE, ...   │
│  waypoints.json     {color: [{code, text, voice, category?, next?}]}         │
└─────────────────────────────────────────────────────────────────────────────┘

TUNING TOOLS (visualize/):
  viz_masks.py          raw frame + red/green/blue masks with tracked blobs
  viz_hue_histogram.py  hue histogram with band ranges shaded (matplotlib)
""")
