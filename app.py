#!/usr/bin/env python3
"""
Mortgage Data Chat Service
Answers free-text mortgage questions from the Fannie Mae API catalog
"""

import logging
import math
import traceback
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS

import project_config
from data_provider import DataProviderError, get_data_provider
from query_processing import extract_chat_request, handle_query

# --- FLASK APP SETUP ---
app = Flask(__name__)
CORS(app, resources={
    r"/*": {
        "origins": "*",
        "methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization"],
    }
})

# --- LOGGING SETUP ---
logging.basicConfig(
    level=getattr(logging, project_config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("chat-service")

SERVICE_VERSION = "1.0.0"


# --- CUSTOM JSON HANDLER ---
def safe_jsonify(data, status_code=200):
    """Safe jsonify that converts NaN and infinite floats to None"""
    def convert_nan(obj):
        if isinstance(obj, dict):
            return {key: convert_nan(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert_nan(item) for item in obj]
        elif isinstance(obj, float):
            if math.isnan(obj) or math.isinf(obj):
                return None
            return obj
        return obj

    response = jsonify(convert_nan(data))
    response.status_code = status_code
    return response


# --- API ENDPOINTS ---

@app.route('/')
def health_check():
    """Basic health check endpoint"""
    return safe_jsonify({
        "message": "Mortgage Data Chat Service is running",
        "status": "healthy",
        "version": SERVICE_VERSION,
        "data_provider": project_config.DATA_PROVIDER,
    })


@app.route('/ping', methods=['GET'])
def ping():
    """Simple ping endpoint"""
    return safe_jsonify({"pong": True, "timestamp": datetime.now().isoformat()})


@app.route('/health', methods=['GET'])
def health():
    """Detailed health check"""
    return safe_jsonify({
        "status": "healthy",
        "version": SERVICE_VERSION,
        "environment": project_config.describe_environment(),
        "timestamp": datetime.now().isoformat()
    })


@app.route('/api/chat', methods=['POST'])
def chat():
    """Classify a chat message, call the matching API and return formatted Markdown"""
    try:
        data = request.get_json(silent=True) or {}
        message, history = extract_chat_request(data)
        if not message:
            return safe_jsonify({"error": "Message is required"}, 400)

        logger.info(f"💬 Chat request ({len(history)} prior turns): {message}")
        return safe_jsonify(handle_query(message, history))

    except Exception as e:
        logger.error(f"❌ Chat endpoint error: {str(e)}")
        logger.error(traceback.format_exc())
        return safe_jsonify({
            "error": "Failed to process request",
            "details": str(e)
        }, 500)


@app.route('/api/test-connection', methods=['GET'])
def test_connection():
    """Report configuration presence and probe the upstream APIs; always 200"""
    results = {
        "timestamp": datetime.now().isoformat(),
        "environment": project_config.describe_environment(),
        "tests": {},
    }

    provider = get_data_provider("live")

    # OAuth token
    try:
        token = provider.token_manager.get_token()
        results["tests"]["oauth"] = {"success": True, "tokenPreview": f"{token[:20]}..."}
    except DataProviderError as e:
        logger.warning(f"⚠️ OAuth test failed: {str(e)}")
        results["tests"]["oauth"] = {"success": False, "error": str(e)}

    # Public API (no auth)
    results["tests"]["publicApi"] = provider.probe(f"{provider.exchange_base}/v1/loan-limits?state=CA")

    # Authenticated API, only when a token could be obtained
    if results["tests"]["oauth"]["success"]:
        results["tests"]["authenticatedApi"] = provider.probe(
            f"{provider.api_base}/v1/construction-spending/section?section=Total", authenticated=True
        )

    return safe_jsonify(results)


# --- ERROR HANDLERS ---
@app.errorhandler(404)
def not_found(error):
    return safe_jsonify({
        "success": False,
        "error": "Endpoint not found",
        "available_endpoints": [
            "GET /",
            "GET /ping",
            "GET /health",
            "POST /api/chat",
            "GET /api/test-connection"
        ]
    }, 404)


@app.errorhandler(500)
def internal_error(error):
    return safe_jsonify({
        "success": False,
        "error": "Internal server error",
        "timestamp": datetime.now().isoformat()
    }, 500)


# --- STARTUP ---
if __name__ == '__main__':
    logger.info(f"🚀 Starting Mortgage Data Chat Service on port {project_config.PORT}")
    logger.info(f"📊 Data provider: {project_config.DATA_PROVIDER}")
    app.run(host='0.0.0.0', port=project_config.PORT, debug=project_config.DEBUG)
