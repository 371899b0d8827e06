# app/routes/resume_routes.py
import base64
import binascii

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

from ..models.resume_document import IngestionOutcome, RawDocument
from ..services.errors import ResumeIngestionError
from ..services.section_headers import SECTION_HEADERS
from ..services.section_segmenter import segment_resume
from ..services.validation_gate import validate_segments

resume_bp = Blueprint("resume_bp", __name__)

REQUIRED_METADATA = ("jobTitle", "companyName", "industry", "experienceLevel")
OPTIONAL_METADATA = ("jobDescription",)


class BadUploadRequest(ValueError):
    pass


def _bad_request(message: str):
    return jsonify({"success": False, "message": message}), 400


def _read_upload():
    """
    Pull (bytes, mime type, filename, metadata) out of either a multipart
    form with a `file` part or a JSON body carrying `resumeBase64`.
    """
    if request.files:
        file = request.files.get("file")
        if not file or file.filename == "":
            raise BadUploadRequest("No file selected")
        fields = request.form
        data = file.read()
        mime_type, filename = file.mimetype, file.filename
    else:
        fields = request.get_json(silent=True) or {}
        if not isinstance(fields, dict):
            raise BadUploadRequest("Missing required fields.")
        encoded = fields.get("resumeBase64")
        filename = fields.get("fileName")
        mime_type = fields.get("fileType")
        if not encoded or not filename or not mime_type:
            raise BadUploadRequest("Missing required fields.")
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise BadUploadRequest("resumeBase64 is not valid base64")

    missing = [k for k in REQUIRED_METADATA if not fields.get(k)]
    if missing:
        raise BadUploadRequest(f"Missing required fields: {', '.join(missing)}")
    metadata = {k: fields.get(k) for k in REQUIRED_METADATA + OPTIONAL_METADATA if fields.get(k)}

    max_bytes = current_app.config["MAX_UPLOAD_MB"] * 1024 * 1024
    if len(data) > max_bytes:
        raise BadUploadRequest(f"File exceeds {current_app.config['MAX_UPLOAD_MB']}MB limit")
    return data, mime_type, filename, metadata


@resume_bp.route("/analyze", methods=["POST"])
def analyze_resume():
    """
    Extract, segment and validate one uploaded resume; store it if accepted.
    """
    try:
        data, mime_type, filename, metadata = _read_upload()
    except BadUploadRequest as e:
        return _bad_request(str(e))

    try:
        document = RawDocument.from_upload(data, mime_type, filename)
        outcome = current_app.resume_pipeline.process(document)
        if not outcome.accepted:
            return jsonify(outcome.to_dict()), 422

        analysis_id = current_app.storage_service.save_analysis(
            metadata, document.filename, document.mime_type, outcome.segments
        )
        payload = outcome.to_dict()
        payload["analysis_id"] = analysis_id
        return jsonify(payload), 201

    except Exception as e:
        current_app.logger.exception(f"Resume analysis failed for {filename}: {e}")
        return jsonify({"success": False, "message": "Server error. Could not analyze resume."}), 500


@resume_bp.route("/segment", methods=["POST"])
def segment_text():
    """Segment text that was already extracted elsewhere."""
    body = request.get_json(silent=True) or {}
    text = body.get("text") if isinstance(body, dict) else None
    if not isinstance(text, str) or not text.strip():
        return _bad_request("Field 'text' is required")

    segments = segment_resume(text)
    try:
        validate_segments(segments)
    except ResumeIngestionError as e:
        return jsonify(IngestionOutcome.reject(e.reason).to_dict()), 422
    return jsonify(IngestionOutcome.accept(segments).to_dict()), 200


@resume_bp.route("/sections", methods=["GET"])
def list_sections():
    return jsonify(
        [{"key": entry.key, "variants": list(entry.variants)} for entry in SECTION_HEADERS]
    ), 200


@resume_bp.errorhandler(RequestEntityTooLarge)
def upload_too_large(e):
    limit = current_app.config["MAX_UPLOAD_MB"]
    return jsonify({"success": False, "message": f"File exceeds {limit}MB limit"}), 413
