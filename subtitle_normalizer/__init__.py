"""Subtitle Normalizer: Japanese caption punctuation, style and segmentation.

WHY: Speech recognizers produce Japanese captions without punctuation,
in mixed registers and with homophone errors. This package turns such a
raw, timestamped transcript into edited captions: punctuated, restyled
to one register, checked for likely misconversions and split into
segments.

HOW: Three layers: core stages (pure text functions over a shared data
model), adapters (MeCab tokenizer), and outer surfaces (formatters, CLI,
HTTP API). Each stage is independently testable with a fake analyzer.

RULES:
- All stages consume and produce the records in core.models
- Adding an output format = one new formatter module, no core changes
- The morphological analyzer is always passed in explicitly
"""

__version__ = "0.1.0"
