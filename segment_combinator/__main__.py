"""Package entry point for ``python -m segment_combinator``.

WHY: Users run the engine as ``python -m segment_combinator <command>``
without installing the console script.

HOW: Delegates to the CLI's main() function, which handles every
subcommand including ``serve``.
"""

import sys

from segment_combinator.cli import main

if __name__ == "__main__":
    sys.exit(main())
