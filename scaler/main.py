import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from scaler.config import ScalerSettings
from scaler.core.scaling_decision_service import ScalingDecisionService
from scaler.domain.request_loader import load_request
from scaler.domain.state_store import StateStore
from scaler.infra.http_adapter import create_app
from scaler.infra.memory_state_store import InMemoryStateStore
from scaler.infra.spanner_client import SpannerAdminClient
from scaler.infra.sql_state_store import SqlStateStore

logger = logging.getLogger(__name__)


def build_state_store(settings: ScalerSettings) -> StateStore:
    if settings.state_backend == "memory":
        return InMemoryStateStore()

    store = SqlStateStore(database_url=settings.database_url)
    store.init_db()
    return store


def build_service(settings: ScalerSettings) -> ScalingDecisionService:
    # --- Infrastructure ---
    spanner = SpannerAdminClient(
        base_url=settings.spanner_api_base_url,
        access_token=settings.spanner_access_token,
        timeout=settings.spanner_request_timeout_sec,
    )
    return ScalingDecisionService(state_store=build_state_store(settings), capacity_requester=spanner)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="scaler", description="Database capacity scaler")
    commands = parser.add_subparsers(dest="command", required=True)

    process = commands.add_parser("process", help="run one scaling request read from a JSON file")
    process.add_argument("request_file")

    serve = commands.add_parser("serve", help="accept scaling requests over HTTP")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    settings = ScalerSettings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    service = build_service(settings)

    if args.command == "serve":
        app = create_app(service)
        app.run(host=args.host or settings.http_host, port=args.port or settings.http_port)
        return 0

    try:
        request = load_request(args.request_file)
    except (OSError, ValueError) as exc:
        logger.error(f"Failed to load scaling request from {args.request_file}: {exc}")
        return 2

    decision = service.process(request)
    print(json.dumps(decision.to_dict(), indent=2))
    return 0 if decision.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
