"""Package entry point for ``python -m ypbank_converter``.

Delegates to the CLI's main() and exits with its return code.
"""

import sys

from ypbank_converter.cli import main

if __name__ == "__main__":
    sys.exit(main())
