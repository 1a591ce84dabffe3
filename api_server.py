#!/usr/bin/env python3
"""
Forensic Face Reconstruction API Server
Each user action of the demo page (upload, live capture, analyze) has its own endpoint.
"""

import os
import logging
import uuid
import random
import threading
from io import BytesIO
from typing import Optional
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from werkzeug.utils import secure_filename

# --- OPTIONAL DETERMINISTIC EXECUTION ---
_seed = os.getenv("RANDOM_SEED")
rng = random.Random(int(_seed)) if _seed else random.Random()

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.analysis_result import AnalysisResult
from models.errors import CameraAccessError, InvalidImageError
from models.image import Image
from pipeline.reconstruct import analyze_and_reconstruct
from services.camera_service import CameraService
from services.image_service import ImageService

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100"))
app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# Initialize services
image_service = ImageService()
camera_service_factory = CameraService

logger = logging.getLogger(__name__)

# Session storage for UI state
sessions = {}


class ForensicSession:
    """Manages state for a single user's page session."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        self.image: Optional[Image] = None
        self.enhanced: Optional[Image] = None
        self.analysis: Optional[AnalysisResult] = None
        self.processing = False
        self.processing_step = ''
        self.camera: Optional[CameraService] = None
        self._lock = threading.Lock()

    @property
    def live_mode(self) -> bool:
        return self.camera is not None

    def begin_processing(self) -> bool:
        """Claim the session for one analysis run. False if a run is active."""
        with self._lock:
            if self.processing:
                return False
            self.processing = True
            return True

    def end_processing(self):
        with self._lock:
            self.processing = False
            self.processing_step = ''

    def set_image(self, image: Image):
        """Replace the working image and drop results of the previous run."""
        self.image = image
        self.enhanced = None
        self.analysis = None

    def stop_camera(self):
        camera, self.camera = self.camera, None
        if camera is not None:
            camera.stop()

    def clear(self):
        """Release the camera and clear all images from memory."""
        self.stop_camera()
        self.image = None
        self.enhanced = None
        self.analysis = None
        self.processing = False
        self.processing_step = ''


def get_or_create_session(session_id: str = None) -> ForensicSession:
    """Get existing session or create new one."""
    if not session_id:
        session_id = str(uuid.uuid4())

    if session_id not in sessions:
        sessions[session_id] = ForensicSession(session_id)

    return sessions[session_id]


def request_session_id() -> Optional[str]:
    """Read session_id from form data, JSON body or query string."""
    if request.form.get('session_id'):
        return request.form['session_id']
    body = request.get_json(silent=True) or {}
    return body.get('session_id') or request.args.get('session_id')


def existing_session() -> Optional[ForensicSession]:
    return sessions.get(request_session_id())


def session_status(session: ForensicSession) -> dict:
    return {
        'session_id': session.session_id,
        'live_mode': session.live_mode,
        'processing': session.processing,
        'processing_step': session.processing_step,
        'has_image': session.image is not None,
        'has_result': session.analysis is not None,
    }


@app.route('/api/upload', methods=['POST'])
def upload_image():
    """Load an uploaded image as the working image and clear prior results."""
    try:
        if 'image' not in request.files:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        file = request.files['image']
        if file.filename == '':
            return jsonify({'success': False, 'message': 'No file selected'}), 400

        if not image_service.is_allowed_upload(file.filename, file.mimetype):
            return jsonify({'success': False, 'message': 'Only image files are accepted'}), 400

        filename = secure_filename(file.filename)

        try:
            image = image_service.decode(file.read())
        except InvalidImageError as e:
            logger.warning(f"Rejected upload {filename}: {e}")
            return jsonify({'success': False, 'message': 'Unreadable image'}), 400

        session = get_or_create_session(request_session_id())
        session.set_image(image)
        logger.info(f"Image loaded for session {session.session_id}: {image.pixels.shape}")

        return jsonify({
            'success': True,
            'session_id': session.session_id,
            'original': image_service.to_data_url(image),
            'width': image.width,
            'height': image.height,
        })

    except Exception as e:
        logger.error(f"Upload error: {e}")
        return jsonify({'success': False, 'message': f'Error loading image: {str(e)}'}), 500


@app.route('/api/live/start', methods=['POST'])
def start_live_detection():
    """Request camera access for live capture."""
    session = get_or_create_session(request_session_id())
    if session.live_mode:
        return jsonify({'success': True, 'session_id': session.session_id, 'live_mode': True})

    camera = camera_service_factory()
    try:
        camera.start()
    except CameraAccessError as e:
        logger.warning(f"Camera access denied for session {session.session_id}: {e}")
        return jsonify({
            'success': False,
            'session_id': session.session_id,
            'live_mode': False,
            'alert': 'Camera access denied',
        }), 403

    session.camera = camera
    logger.info(f"Live detection started for session {session.session_id}")
    return jsonify({'success': True, 'session_id': session.session_id, 'live_mode': True})


@app.route('/api/live/frame', methods=['GET'])
def live_frame():
    """Serve the current camera frame as a JPEG preview."""
    session = existing_session()
    if session is None or not session.live_mode:
        return jsonify({'error': 'Live detection is not running'}), 409

    try:
        frame = session.camera.read_frame()
    except CameraAccessError as e:
        logger.error(f"Camera read failed for session {session.session_id}: {e}")
        session.stop_camera()
        return jsonify({'error': str(e)}), 503

    return send_file(BytesIO(image_service.encode_jpeg(frame)), mimetype='image/jpeg')


@app.route('/api/live/capture', methods=['POST'])
def capture_from_video():
    """Freeze the current frame as the working image and release the camera."""
    session = existing_session()
    if session is None or not session.live_mode:
        return jsonify({'success': False, 'message': 'Live detection is not running'}), 409

    camera, session.camera = session.camera, None
    try:
        image = camera.capture_frame()
    except CameraAccessError as e:
        logger.error(f"Frame capture failed for session {session.session_id}: {e}")
        return jsonify({'success': False, 'live_mode': False, 'message': str(e)}), 503

    session.set_image(image)
    return jsonify({
        'success': True,
        'session_id': session.session_id,
        'live_mode': False,
        'original': image_service.to_data_url(image),
        'width': image.width,
        'height': image.height,
    })


@app.route('/api/live/stop', methods=['POST'])
def stop_live_detection():
    """Release the camera. Always succeeds."""
    session = existing_session()
    if session is not None:
        session.stop_camera()
        logger.info(f"Live detection stopped for session {session.session_id}")
    return jsonify({'success': True, 'live_mode': False})


@app.route('/api/analyze', methods=['POST'])
def analyze():
    """Run the analyze & reconstruct pipeline on the working image."""
    session = existing_session()
    if session is None or session.image is None:
        return jsonify({'success': False, 'message': 'No image loaded'}), 400
    if not session.begin_processing():
        return jsonify({'success': False, 'message': 'Analysis already running',
                        'processing_step': session.processing_step}), 409

    try:
        logger.info(f"Running reconstruction for session {session.session_id}")

        def on_stage(label: str):
            session.processing_step = label

        image = session.image
        enhanced, analysis = analyze_and_reconstruct(image, on_stage, rng=rng,
                                                     image_service=image_service)
        # A newer upload or capture replaced the image while this run was in flight
        superseded = session.image is not image
        if superseded:
            logger.info(f"Discarding stale result for session {session.session_id}")
        else:
            session.enhanced = enhanced
            session.analysis = analysis

        return jsonify({
            'success': True,
            'session_id': session.session_id,
            'enhanced': image_service.to_data_url(enhanced),
            'analysis': analysis.to_dict(),
            'superseded': superseded,
        })

    except Exception as e:
        logger.error(f"Reconstruction error: {e}")
        return jsonify({'success': False, 'message': f'Error in reconstruction: {str(e)}'}), 500
    finally:
        session.end_processing()


@app.route('/api/status', methods=['GET'])
def status():
    """Current UI state, including the stage label while processing."""
    session = existing_session()
    if session is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify(session_status(session))


@app.route('/api/image/<kind>')
def serve_image(kind):
    """Serve the original or enhanced image of a session."""
    session = existing_session()
    if session is None:
        return jsonify({'error': 'Session not found'}), 404

    image = {'original': session.image, 'enhanced': session.enhanced}.get(kind)
    if image is None:
        return jsonify({'error': 'Image not found'}), 404
    return send_file(BytesIO(image_service.encode_jpeg(image)), mimetype='image/jpeg')


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'message': 'Forensic Face Reconstruction API is running',
        'active_sessions': len(sessions)
    })


@app.route('/api/clear-session', methods=['POST'])
def clear_session():
    """Clear a session, release its camera and free memory."""
    session_id = request_session_id()
    if session_id and session_id in sessions:
        sessions.pop(session_id).clear()
        return jsonify({'success': True, 'message': 'Session cleared'})
    return jsonify({'success': False, 'message': 'Session not found'})


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_UPLOAD_SIZE_MB}MB.'}), 413


@app.errorhandler(400)
def bad_request(e):
    """Handle bad request error."""
    return jsonify({'error': 'Bad request'}), 400


@app.errorhandler(404)
def not_found(e):
    """Handle unknown routes."""
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    port = int(os.getenv("PORT", "5000"))
    print("🚀 Starting Forensic Face Reconstruction API Server...")
    print(f"🔧 Max upload size: {MAX_UPLOAD_SIZE_MB}MB")
    print("🌐 CORS enabled for frontend communication")
    print("📋 Endpoints:")
    print("   1. /api/upload")
    print("   2. /api/live/start, /api/live/capture, /api/live/stop")
    print("   3. /api/analyze")
    print("   4. /api/status")
    print("="*60)

    app.run(host='0.0.0.0', port=port, debug=False, threaded=True)
