import os
import logging
from typing import Optional
from flask import Flask, request, jsonify
from utils.config import LOG_LEVEL, load_settings
from utils.check_executor import check_ip_async
from utils.modules.firehol import FireholSource, create_session
from utils.request_evaluator import extract_from_flask_request

logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)

console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler.setFormatter(formatter)

logger.addHandler(console_handler)

logging.getLogger('utils').setLevel(LOG_LEVEL)
logging.getLogger('utils').addHandler(console_handler)

app = Flask(__name__)
app.config['DEBUG'] = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
app.json.sort_keys = False
app.config['BLOCKLIST_SETTINGS'] = load_settings()
# Called with (session, settings); replaced in tests with a fake source
app.config['BLOCKLIST_SOURCE_FACTORY'] = FireholSource


@app.after_request
def add_cors_headers(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET, OPTIONS'
    return response


@app.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'ok'})


@app.route('/check', methods=['GET'])
@app.route('/check/<ip>', methods=['GET'])
async def check(ip: Optional[str] = None):
    """Check the given or inferred IP address against the blocklists"""
    settings = app.config['BLOCKLIST_SETTINGS']
    source_factory = app.config['BLOCKLIST_SOURCE_FACTORY']

    extracted = extract_from_flask_request(request, path_ip=ip)

    async with create_session(settings) as session:
        source = source_factory(session, settings)
        payload, status_code = await check_ip_async(
            extracted,
            source,
            concurrency=settings.scan_concurrency,
        )

    if status_code != 200:
        logger.warning(f"Check failed with status {status_code}: {payload.get('error')}")
    return jsonify(payload), status_code


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.getenv('PORT', '5000')))
