"""Package entry point for ``python -m cloze_memorizer``.

WHY: Users run the trainer as ``python -m cloze_memorizer practice
passage.txt --state progress.json`` without installing the console
script. Python's ``-m`` flag looks for ``__main__.py`` inside the
package and executes it.

HOW: Delegates to the CLI's main() function.
"""

if __name__ == "__main__":
    from cloze_memorizer.cli import main
    main()
