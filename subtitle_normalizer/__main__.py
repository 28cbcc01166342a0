"""Package entry point for ``python -m subtitle_normalizer``.

Delegates to the CLI's main(). ``--serve`` starts the HTTP API instead.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from subtitle_normalizer.server.app import run_api
        run_api()
    else:
        from subtitle_normalizer.cli import main
        main()
