"""Cloze Memorizer — progressive cloze deletion for memorizing passages.

WHY: Memorizing a fixed text (a scripture chapter, a poem) works best
when words disappear gradually and, once most of the text is hidden,
practice narrows to one verse or couplet at a time with short review
intervals. This package holds the algorithms behind that workflow,
free of any UI, database, or HTTP layer.

HOW: Three-stage pipeline — prepare (optional sections, tokenizing,
segmenting), select (which word indices are hidden), schedule (which
segment is practiced next). Each stage is a set of pure functions in
``core``; ``session.PracticeSession`` wires them into a state machine a
host application can drive.

RULES:
- Core functions never read ambient state; clock and randomness are injected
- Word indices are the stable contract between tokenizer, segmenter,
  deletion selector, and renderer
- The persisted record (percentage, hidden indices, verse progress) is
  enough to rebuild a session
"""

__version__ = "0.1.0"
