"""Normalization core: data records and the text stages.

WHY: Everything that decides how caption text is punctuated, restyled,
checked and segmented lives here, independent of how captions are read
or written. The CLI, the API and the formatters are thin layers on top.

HOW: models.py defines the records, rules.py the rewrite tables,
tokens.py the analyzer interface. punctuation.py, style.py,
misconversion.py, kana.py, segmenter.py and review.py are the stages;
pipeline.py maps them over caption lists.

RULES:
- Stages are stateless functions; no module holds cross-call state
- Stages that tokenize are async and take the analyzer as an argument
- Nothing here reads configuration or the environment
"""
