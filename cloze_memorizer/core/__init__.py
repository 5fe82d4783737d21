"""Core text-processing, selection, and scheduling modules.

WHY: The core package contains the stable heart of the trainer — the
IR dataclasses and the pure algorithms over them. These are consumed by
the practice session and the formatters and must stay side-effect free.

HOW: ir.py defines the data structures, optional.py resolves optional
sections, tokenizer.py and segmenter.py turn text into addressable
words and verses, deletion.py picks hidden words, scheduler.py handles
spaced-repetition review.

RULES:
- IR dataclasses are the contract — change with care
- Time and randomness are parameters: scheduler.system_clock() and the
  global random module are only defaults that callers can replace
- Functions return new lists/maps; inputs are never mutated
"""
