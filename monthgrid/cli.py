"""
Month layout command line.
Loads schedules from a JSON file and prints each day's lanes.

    monthgrid layout schedules.json --start 2026-10-01 --end 2026-10-31
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from monthgrid.core.config_manager import Config
from monthgrid.core.month_controller import MonthController
from monthgrid.models.schedule import validate_schedules
from monthgrid.models.view_model import is_allday_like
from monthgrid.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="monthgrid", description="Month grid lane layout")
    sub = parser.add_subparsers(dest="command", required=True)

    layout = sub.add_parser("layout", help="Lay out schedules from a JSON file")
    layout.add_argument("file", help="JSON file holding a list of schedule objects")
    layout.add_argument("--start", required=True, help="First day (YYYY-MM-DD)")
    layout.add_argument("--end", required=True, help="Last day (YYYY-MM-DD)")
    policy = layout.add_mutually_exclusive_group()
    policy.add_argument("--allday-first", dest="allday_first", action="store_true",
                        help="Stack timed schedules below all-day bars")
    policy.add_argument("--stack-from-top", dest="allday_first", action="store_false",
                        help="Put timed schedules in the first free lane")
    layout.set_defaults(allday_first=Config.ALLDAY_FIRST_MODE)
    layout.add_argument("--json", action="store_true", help="Print JSON instead of text")
    return parser


def _load_schedules(path: Path) -> Optional[list]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {path}: {e}")
        return None
    if not isinstance(data, list):
        logger.error(f"{path} must contain a JSON list of schedules")
        return None
    return data


def _format_line(view_model) -> str:
    model = view_model.value_of()
    when = "all-day" if is_allday_like(view_model) else model.get_starts().strftime("%H:%M")
    return f"  {view_model.top:>3}  {when:<7}  {model.title}"


def cmd_layout(args) -> int:
    raw = _load_schedules(Path(args.file))
    if raw is None:
        return 1

    schedules, errors = validate_schedules(raw)
    if errors:
        for error in errors:
            logger.error(str(error))
        return 1

    try:
        start = date.fromisoformat(args.start)
        end = date.fromisoformat(args.end)
    except ValueError as e:
        logger.error(f"Invalid date range: {e}")
        return 1

    controller = MonthController()
    for schedule in schedules:
        controller.add_schedule(schedule)

    result = controller.find_by_date_range(start, end, allday_first_mode=args.allday_first)

    if args.json:
        payload = {ymd: [vm.to_dict() for vm in day] for ymd, day in result.items()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for ymd, day in result.items():
        if not len(day):
            continue
        print(ymd)
        for view_model in day:
            print(_format_line(view_model))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    if args.command == "layout":
        return cmd_layout(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
