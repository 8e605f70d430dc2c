from flasgger import Swagger
from diary.content import SLOT_NAMES

def init_swagger(app):
    """Initialize Swagger documentation."""
    swagger_config = {
        "headers": [],
        "specs": [
            {
                "endpoint": 'apispec',
                "route": '/apispec.json',
                "rule_filter": lambda rule: True,  # all in
                "model_filter": lambda tag: True,  # all in
            }
        ],
        "static_url_path": "/flasgger_static",
        "swagger_ui": True,
        "specs_route": "/api/docs/",
        "title": "Unwind API Documentation",
        "uiversion": 3,
        "info": {
            "title": "Unwind API",
            "description": "Local API for Unwind - a schema therapy diary with voice recordings",
            "version": "1.0.0"
        },
        "tags": [
            {
                "name": "Entries",
                "description": "Diary entries and the schema mode taxonomy"
            },
            {
                "name": "Audio",
                "description": "Recording, playback and deletion of voice recordings"
            }
        ]
    }

    # Model definitions
    content_field = {
        'type': 'object',
        'properties': {
            'is_audio': {'type': 'boolean'},
            'content': {'type': 'string', 'description': 'Text, or a recording filename when is_audio is true'}
        }
    }

    content_fields = {
        'type': 'object',
        'properties': {slot: {'$ref': '#/definitions/ContentField'} for slot in SLOT_NAMES}
    }

    definitions = {
        'ContentField': content_field,
        'ContentFields': content_fields,
        'EntryDraft': {
            'type': 'object',
            'properties': {
                'title': {'type': 'string'},
                'schema_mode': {'type': 'string', 'example': 'Healthy Adult'},
                'need_met': {'type': 'string', 'enum': ['Yes', 'No', 'Unsure']},
                'fields': {'$ref': '#/definitions/ContentFields'}
            }
        },
        'DiaryEntry': {
            'type': 'object',
            'properties': {
                'id': {'type': 'string', 'format': 'uuid'},
                'date': {'type': 'string', 'format': 'date-time'},
                'title': {'type': 'string'},
                'display_title': {'type': 'string'},
                'schema_mode': {'type': 'string'},
                'resolved_schema_mode': {'type': 'string'},
                'schema_mode_category': {'type': 'string'},
                'need_met': {'type': 'string', 'enum': ['Yes', 'No', 'Unsure']},
                'fields': {'$ref': '#/definitions/ContentFields'},
                'audio_filenames': {'type': 'array', 'items': {'type': 'string'}},
                'updated_at': {'type': 'string', 'format': 'date-time'}
            }
        },
        'Error': {
            'type': 'object',
            'properties': {
                'error': {'type': 'string', 'description': 'Error message'}
            }
        }
    }

    return Swagger(app, config=swagger_config, template={'definitions': definitions}, merge=True)
