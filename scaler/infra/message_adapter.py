import base64
import binascii
import json
from typing import Any, Union

from scaler.core.scaling_decision_service import ScalingDecision, ScalingDecisionService
from scaler.domain.errors import MalformedRequestError, ScalingFailedError
from scaler.domain.request_loader import parse_request


def decode_message_data(data: Union[str, bytes]) -> Any:
    """Decodes the base64 JSON payload of a queued scaling message."""
    try:
        payload = base64.b64decode(data, validate=True).decode("utf-8")
        return json.loads(payload)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise MalformedRequestError("Scaling message is not base64 encoded JSON") from exc


def handle_message(service: ScalingDecisionService, data: Union[str, bytes]) -> ScalingDecision:
    """
    Processes one queued scaling message.

    A FAILED decision is raised as ScalingFailedError so the transport can
    apply its redelivery policy; malformed messages raise MalformedRequestError.
    """
    request = parse_request(decode_message_data(data))
    decision = service.process(request)

    if not decision.succeeded:
        raise ScalingFailedError(f"Scaling {decision.instance_key} failed: {decision.error}")
    return decision
