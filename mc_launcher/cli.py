from __future__ import annotations
import argparse
import json
import sys
from pydantic import ValidationError
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .errors import LauncherError
from .orchestrator import Orchestrator

log = get_logger("mc.launcher")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mc-launcher")
    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("run", help="Install Java + server if needed and run the server (default)")
    sub.add_parser("plan", help="Print a dry-run plan as JSON and exit")
    sub.add_parser("java-version", help="Print the Java major version that would be used")
    return parser

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 1
    setup_logging(settings)

    orch = Orchestrator(settings)

    if args.cmd == "java-version":
        print(orch.runtime.major_version)
        return 0

    if args.cmd == "plan":
        plan = orch.plan().to_dict()
        print(json.dumps(plan, indent=2, ensure_ascii=False))
        return 0 if plan.get("ok", True) else 1

    try:
        return orch.run()
    except LauncherError as e:
        log.error("%s", e)
        return 1
    except Exception as e:
        log.exception("Unexpected error: %s", e)
        return 1
