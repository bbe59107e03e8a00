"""Module entrypoint for `python -m jsonguard`.

Delegates to the checker CLI implementation.
"""

from .checker.run_check import main


if __name__ == "__main__":
    main()
