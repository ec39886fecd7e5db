import logging

from flask import Flask, jsonify, request

from scaler.core.scaling_decision_service import ScalingDecisionService
from scaler.domain.errors import MalformedRequestError, ScalingFailedError
from scaler.domain.request_loader import parse_request
from scaler.infra.message_adapter import handle_message

logger = logging.getLogger(__name__)


def create_app(service: ScalingDecisionService) -> Flask:
    app = Flask(__name__)

    @app.route('/healthz', methods=['GET'])
    def healthz():
        return jsonify({'status': 'ok'})

    @app.route('/scale', methods=['POST'])
    def scale():
        try:
            scaling_request = parse_request(request.get_json(silent=True))
        except MalformedRequestError as exc:
            logger.error(f"Rejected scaling request: {exc}")
            return jsonify({'error': str(exc)}), 400

        decision = service.process(scaling_request)
        return jsonify(decision.to_dict()), (200 if decision.succeeded else 500)

    @app.route('/pubsub', methods=['POST'])
    def pubsub():
        envelope = request.get_json(silent=True) or {}
        message = envelope.get('message') if isinstance(envelope, dict) else None
        if not isinstance(message, dict) or not message.get('data'):
            return jsonify({'error': 'Push envelope has no message data'}), 400

        try:
            decision = handle_message(service, message['data'])
        except MalformedRequestError as exc:
            logger.error(f"Rejected scaling message: {exc}")
            return jsonify({'error': str(exc)}), 400
        except ScalingFailedError as exc:
            return jsonify({'error': str(exc)}), 500

        return jsonify(decision.to_dict()), 200

    return app
