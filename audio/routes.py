from flask import Blueprint, request, jsonify, send_file
from flasgger import swag_from
from app.extensions import audio
from .manager import MicrophonePermission

# Create blueprint
audio_bp = Blueprint('audio', __name__)

FILENAME = {
    'name': 'filename',
    'in': 'path',
    'type': 'string',
    'required': True,
    'description': 'Recording filename as stored in a content field'
}


def _playback_state():
    return {
        'is_playing': audio.is_playing,
        'current_playback_filename': audio.current_playback_filename
    }


@audio_bp.route('/permission', methods=['GET'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Get the microphone permission status',
    'responses': {'200': {'description': 'granted, denied or undetermined'}}
})
def get_permission():
    """Get the microphone permission status."""
    return jsonify({'status': audio.permission_status.value})


@audio_bp.route('/permission', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Request microphone access',
    'responses': {'200': {'description': 'Whether access is granted'}}
})
def request_permission():
    """Request microphone access."""
    result = []
    audio.request_microphone_permission(result.append)
    return jsonify({'granted': result[0], 'status': audio.permission_status.value})


@audio_bp.route('/recordings/start', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Start a new recording. Any recording in progress is discarded.',
    'responses': {
        '200': {'description': 'Recording started'},
        '403': {'description': 'Microphone permission denied'},
        '500': {'description': 'Recording could not be started'}
    }
})
def start_recording():
    """Start recording."""
    if not audio.start_recording():
        if audio.permission_status is MicrophonePermission.DENIED:
            return jsonify({'error': 'Microphone permission denied'}), 403
        return jsonify({'error': 'Failed to start recording'}), 500

    return jsonify({'recording': True})


@audio_bp.route('/recordings/chunk', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Append captured audio bytes to the active recording',
    'consumes': ['application/octet-stream'],
    'responses': {
        '200': {'description': 'Chunk stored'},
        '409': {'description': 'No recording in progress'}
    }
})
def write_chunk():
    """Append audio data to the active recording."""
    if not audio.is_recording:
        return jsonify({'error': 'No recording in progress'}), 409

    if not audio.write_chunk(request.get_data()):
        return jsonify({'error': 'Failed to write recording'}), 500

    return jsonify({'recording': True})


@audio_bp.route('/recordings/stop', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Stop recording and get the filename to store in a content field',
    'responses': {
        '200': {
            'description': 'Recording stopped',
            'schema': {'type': 'object', 'properties': {'filename': {'type': 'string'}}}
        },
        '409': {'description': 'No recording in progress'}
    }
})
def stop_recording():
    """Stop recording."""
    filename = audio.stop_recording()

    if filename is None:
        return jsonify({'error': 'No recording in progress'}), 409

    return jsonify({'filename': filename})


@audio_bp.route('/recordings', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Upload a finished recording',
    'consumes': ['multipart/form-data'],
    'parameters': [{
        'name': 'audio',
        'in': 'formData',
        'type': 'file',
        'required': True,
        'description': 'Audio file for a content field'
    }],
    'responses': {
        '201': {
            'description': 'Recording stored',
            'schema': {'type': 'object', 'properties': {'filename': {'type': 'string'}}}
        },
        '400': {'description': 'Invalid input'}
    }
})
def upload_recording():
    """Store an uploaded recording."""
    if 'audio' not in request.files:
        return jsonify({'error': 'No audio file provided'}), 400

    audio_file = request.files['audio']

    if not audio_file or audio_file.filename == '':
        return jsonify({'error': 'No selected file'}), 400

    filename = audio.save_upload(audio_file.stream, audio_file.filename)

    if filename is None:
        return jsonify({'error': 'File type not allowed'}), 400

    return jsonify({'filename': filename}), 201


@audio_bp.route('/recordings/<filename>', methods=['GET'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Play a recording. Any other playback is stopped.',
    'parameters': [FILENAME],
    'produces': ['audio/mp4'],
    'responses': {
        '200': {'description': 'Audio stream'},
        '404': {'description': 'Recording not found'}
    }
})
def play_recording(filename):
    """Play a recording."""
    path = audio.play(filename)

    if path is None:
        return jsonify({'error': 'Recording not found'}), 404

    return send_file(path, mimetype='audio/mp4', conditional=True)


@audio_bp.route('/recordings/<filename>', methods=['DELETE'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Delete a recording. Deleting a missing recording succeeds.',
    'parameters': [FILENAME],
    'responses': {'200': {'description': 'Recording deleted'}}
})
def delete_recording(filename):
    """Delete a recording."""
    audio.delete_recording(filename)
    return jsonify({'message': 'Recording deleted'})


@audio_bp.route('/playback', methods=['GET'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Get the playback state',
    'responses': {'200': {'description': 'Playback state'}}
})
def get_playback():
    """Get the playback state."""
    return jsonify(_playback_state())


@audio_bp.route('/playback/<action>', methods=['POST'])
@swag_from({
    'tags': ['Audio'],
    'description': 'Control playback',
    'parameters': [{
        'name': 'action',
        'in': 'path',
        'type': 'string',
        'enum': ['stop', 'pause', 'resume'],
        'required': True
    }],
    'responses': {
        '200': {'description': 'Playback state'},
        '404': {'description': 'Unknown action'}
    }
})
def control_playback(action):
    """Stop, pause or resume playback."""
    handlers = {
        'stop': audio.stop_playback,
        'pause': audio.pause_playback,
        'resume': audio.resume_playback,
    }

    if action not in handlers:
        return jsonify({'error': f'Unknown playback action: {action}'}), 404

    handlers[action]()
    return jsonify(_playback_state())
