# protocol_adapter/main.py
"""
Command line entry point.

Stands in for the plugin host: builds a converter service from the
environment and runs a single conversion, printing the result as JSON.

Usage:
    python -m protocol_adapter.main issue --device d1 --model m1 --feature f1 --value f1=23.5
    python -m protocol_adapter.main report '{"device":"dev-1","type":"temp","value":"23.5"}'
    python -m protocol_adapter.main request --model m1 --feature f1
"""
import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from protocol_adapter import config
from protocol_adapter.errors import ConversionError
from protocol_adapter.translation.factory import ConverterFactory

logger = logging.getLogger(__name__)


class RequestIdFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = '-'
        return True


def setup_logging(level_name: str = config.LOG_LEVEL) -> None:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )
    logging.getLogger().addFilter(RequestIdFilter())
    logging.getLogger("protocol_adapter").setLevel(log_level)


def parse_values(pairs: List[str]) -> Dict[str, str]:
    """Parse repeated KEY=VALUE arguments into a dict."""
    values = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got: {pair}")
        values[key] = value
    return values


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="protocol-adapter",
        description="Convert between device wire messages and platform envelopes",
    )
    parser.add_argument("--config", help="Protocol manifest path (default: PROTOCOL_CONFIG_PATH)")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    issue = subparsers.add_parser("issue", help="Convert an issue request to device messages")
    issue.add_argument("--device", required=True, help="Internal device id")
    issue.add_argument("--model", default="", help="Internal model id")
    issue.add_argument("--feature", required=True, help="Internal feature id")
    issue.add_argument("--value", action="append", default=[], metavar="KEY=VALUE",
                       help="Value for a feature or input param id, repeatable")

    report = subparsers.add_parser("report", help="Convert device messages to a platform envelope")
    report.add_argument("messages", nargs="+", help="JSON-encoded device messages")

    request = subparsers.add_parser("request", help="Fan a report request out to the devices of a model")
    request.add_argument("--model", required=True, help="Internal model id")
    request.add_argument("--feature", required=True, help="Internal feature id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        service = ConverterFactory.create_service(registry_source="static", config_path=args.config)
    except ConversionError as e:
        logger.error(f"Failed to start {config.SERVICE_NAME}: {e}")
        return 1

    if args.command == "issue":
        try:
            values = parse_values(args.value)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
        result = service.convert_issue(args.device, args.model, args.feature, values)
        output = {
            "input_messages": result.input_messages,
            "output_param_ids": result.output_param_ids,
            "issue_topic": result.issue_topic,
            "issue_response_topic": result.issue_response_topic,
        }
    elif args.command == "report":
        result = service.convert_to_envelope(args.messages)
        output = {
            "topic": result.topic,
            "payload": result.payload.decode("utf-8"),
        }
    else:
        result = service.convert_report_request(args.model, args.feature)
        output = {"messages": result.messages}

    if not result.success:
        print(json.dumps({"error_kind": result.error_kind, "error": result.error}))
        return 1

    print(json.dumps(output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
