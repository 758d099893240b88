import logging
import sys

from config import EngineSettings, get_settings
from csv_io import write_accounts
from errors import InputReadError
from payments_engine import REJECTIONS_LOGGER, PaymentsEngine

logger = logging.getLogger(__name__)


def usage(program: str) -> str:
    return (
        f"usage: {program} [input.csv]\n"
        "       Calculates account balances from a list of transactions."
    )


def configure_logging(settings: EngineSettings) -> None:
    """
    Log to stderr at `log_level`. Rejection diagnostics are governed by `report_errors`
    alone: when it is on they are emitted even if `log_level` is above WARNING.
    """
    logging.basicConfig(format="%(levelname)s: %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(settings.log_level.upper())
    logging.getLogger(REJECTIONS_LOGGER).setLevel(logging.WARNING if settings.report_errors else logging.NOTSET)


def main(argv=None):
    argv = sys.argv if argv is None else argv
    program = argv[0] if argv else "payments-engine"

    if len(argv) == 2 and argv[1] in ("-h", "--help"):
        print(usage(program))
        sys.exit(0)
    if len(argv) != 2:
        print(usage(program), file=sys.stderr)
        sys.exit(2)

    settings = get_settings()
    configure_logging(settings)

    engine = PaymentsEngine(settings)
    try:
        accounts = engine.process_file(argv[1])
    except InputReadError as e:
        logger.error(str(e))
        sys.exit(1)

    write_accounts(accounts, sys.stdout)


if __name__ == "__main__":
    main()
