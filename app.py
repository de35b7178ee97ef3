import os
import logging

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from applymail.composer import EmailComposer
from applymail.llm import GroqCapability
from applymail.normalizer import normalize_request

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_composer(llm=None) -> EmailComposer:
    if llm is None:
        try:
            llm = GroqCapability()
        except ValueError as e:
            # no key: every request gets the template email
            logger.warning("%s; emails will use the fallback template", e)
    return EmailComposer(llm=llm)


def read_body():
    """
    The request body as JSON, or None when it is empty.
    A body that is not valid JSON raises BadRequest.
    """
    if not request.get_data(cache=True):
        return None
    try:
        return request.get_json(force=True)
    except BadRequest:
        logger.warning("Request body is not valid JSON (%d bytes)", request.content_length or 0)
        raise


def create_app(llm=None, composer: EmailComposer = None) -> Flask:
    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": os.getenv("CORS_ORIGINS", "*")}})

    # ✅ one composer per app; it holds no per-request state
    app.extensions["email_composer"] = composer or build_composer(llm)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/email/generate", methods=["POST"])
    def generate_email():
        """
        Accepts either:
        1. structured applicant data (JSON object)
        2. free text: a JSON string or {"input": "..."}
        """
        try:
            body = read_body()
            normalized = normalize_request(body)

            composer = app.extensions["email_composer"]
            email = composer.compose(normalized.context, raw_text=normalized.raw_text)

            return jsonify({
                "success": True,
                "parsedInput": normalized.parsed_input,
                "generated": email.to_dict(),
            }), 200
        except Exception as e:
            app.logger.exception("Error generating email")
            return jsonify({
                "success": False,
                "message": "Internal Server Error",
                "error": str(e),
            }), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(port=int(os.getenv("PORT", "5000")), debug=True)
