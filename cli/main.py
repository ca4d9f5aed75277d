"""CLI entry point."""

import os
import shlex
import sys

from common.logging_config import setup_logging
from cli.parser import ParseError, parse_command
from cli.repl import dispatch_command, repl_loop


def run_once(argv: list[str]) -> int:
    """
    Run a single command given on the command line, e.g. `askdoc search report`.

    Returns:
        Process exit status
    """
    try:
        cmd_obj = parse_command(shlex.join(argv))
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    result = dispatch_command(cmd_obj)
    print(result)
    return 1 if result.startswith("Error") else 0


def main() -> None:
    """Entry point for CLI."""
    debug = '--debug' in sys.argv
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'INFO')

    logger = setup_logging('cli', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")
        sys.argv.remove('--debug')

    args = sys.argv[1:]
    logger.info("CLI starting...")
    try:
        if args:
            sys.exit(run_once(args))
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()
