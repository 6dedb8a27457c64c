"""VaR service entry point.

Modes:
  serve   Run the HTTP API (POST /api/compute_var, POST /api/fetch_returns).
  fetch   Fetch one year of daily returns for a ticker and print a preview.
  var     Compute VaR for --returns or for a fetched --ticker.
  report  Write a CSV report with VaR at 95% and 99% for a ticker.

Examples:
  python main.py serve --port 8000
  python main.py fetch --ticker AAPL
  python main.py var --ticker AAPL --method parametric --confidence 0.99
  python main.py var --returns -0.05 -0.02 0.01 0.03 0.04 --confidence 0.8
  python main.py report --ticker MSFT --method montecarlo --seed 7 --horizon-days 10
"""

import logging

from config.settings import Settings
from var_service.cli import runtime  # noqa: F401  registers @command handlers
from var_service.cli.arguments import apply_common_settings, build_argument_parser, dispatch
from var_service.errors import VarServiceError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


def main(argv=None) -> None:
    args = build_argument_parser().parse_args(argv)
    settings = Settings()
    apply_common_settings(args, settings)
    try:
        dispatch(args, settings)
    except VarServiceError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
