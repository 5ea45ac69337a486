from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from asgiref.wsgi import WsgiToAsgi
from dotenv import load_dotenv
from io import BytesIO
from uvicorn import run
import google.generativeai as genai
import logging
import os

from deckgen import (
    PPTX_MIMETYPE,
    DeckRequestError,
    create_master_template,
    generate_from_prompt,
    generate_from_table,
    parse_prompt_request,
)


load_dotenv()


def env_number(name, default, cast=float):
    try:
        return cast(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)
asgi_app = WsgiToAsgi(app)

# Configure Gemini
GOOGLE_API_KEY = os.getenv('GOOGLE_API_KEY') or os.getenv('GEMINI_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.0-flash')
GEMINI_TEMPERATURE = env_number('GEMINI_TEMPERATURE', 0.4)
GEMINI_MAX_OUTPUT_TOKENS = env_number('GEMINI_MAX_OUTPUT_TOKENS', 8192, int)
GEMINI_TIMEOUT = env_number('GEMINI_TIMEOUT', 60)
PORT = env_number('PORT', 8000, int)

genai.configure(api_key=GOOGLE_API_KEY)


def gemini_generate_text(instruction):
    """Send one instruction to Gemini and return the raw response text."""
    model = genai.GenerativeModel(GEMINI_MODEL)
    response = model.generate_content(
        instruction,
        generation_config=genai.types.GenerationConfig(
            temperature=GEMINI_TEMPERATURE,
            max_output_tokens=GEMINI_MAX_OUTPUT_TOKENS
        ),
        request_options={'timeout': GEMINI_TIMEOUT}
    )
    return response.text


def request_payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def failure(message, error, status):
    return jsonify({'success': False, 'message': message, 'error': error}), status


@app.route('/api/generate-ppt', methods=['POST'])
def generate_ppt():
    try:
        data = request_payload()
        options = parse_prompt_request(data)
        deck = generate_from_prompt(options, app.config.get('GENERATE_TEXT', gemini_generate_text))

        if data.get('download'):
            return send_file(
                BytesIO(deck.content),
                as_attachment=True,
                download_name=deck.filename,
                mimetype=PPTX_MIMETYPE
            )
        return jsonify({
            'success': True,
            'message': 'Presentation generated successfully',
            'data': deck.data
        })
    except DeckRequestError as e:
        return failure(e.message, e.message, e.status_code)
    except Exception as e:
        logger.exception('Error in /api/generate-ppt')
        return failure(f'Failed to generate presentation: {e}', str(e), 500)


@app.route('/api/generate-ppt-from-table', methods=['POST'])
def generate_ppt_from_table():
    try:
        data = request_payload()
        deck = generate_from_table(
            data.get('tableHtml'),
            title=data.get('title'),
            author=data.get('author'),
            company=data.get('company')
        )
        return jsonify({
            'success': True,
            'message': 'Table presentation created successfully',
            'data': deck.data
        })
    except DeckRequestError as e:
        return failure(e.message, e.message, e.status_code)
    except Exception as e:
        logger.exception('Error in /api/generate-ppt-from-table')
        return failure(f'Failed to generate table presentation: {e}', str(e), 500)


@app.route('/api/master-template', methods=['POST'])
def master_template():
    try:
        data = request_payload()
        deck = create_master_template(
            data.get('title'),
            background=data.get('background'),
            color_scheme=data.get('colorScheme'),
            fonts=data.get('fonts'),
            logo_path=data.get('logoPath'),
            logo_position=data.get('logoPosition'),
            footer_text=data.get('footerText')
        )
        return jsonify({
            'success': True,
            'message': 'Master template created successfully',
            'data': deck.data
        })
    except DeckRequestError as e:
        return failure(e.message, e.message, e.status_code)
    except Exception as e:
        logger.exception('Error in /api/master-template')
        return failure(f'Failed to create master template: {e}', str(e), 500)


@app.route('/api/health', methods=['GET'])
def health_check():
    return jsonify({'status': 'healthy', 'message': 'Presentation Generator API is running'})


if __name__ == '__main__':
    run("app:asgi_app", host="0.0.0.0", port=PORT)
