from flask import request, jsonify, current_app
from flasgger import swag_from
from app.extensions import db, audio
from .models import DiaryEntry
from .schema_modes import grouped_modes
from .services import (
    EntryDraft, create_entry, update_entry, delete_entry, discard_draft,
)

from . import diary_bp


def _get_entry(entry_id):
    return db.session.get(DiaryEntry, entry_id)


ENTRY_BODY = {
    'name': 'body',
    'in': 'body',
    'required': True,
    'schema': {'$ref': '#/definitions/EntryDraft'}
}

ENTRY_ID = {
    'name': 'entry_id',
    'in': 'path',
    'type': 'string',
    'required': True,
    'description': 'ID of the diary entry'
}


@diary_bp.route('', methods=['POST'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Create a new diary entry',
    'parameters': [ENTRY_BODY],
    'responses': {
        '201': {
            'description': 'Diary entry created successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'message': {'type': 'string'},
                    'entry': {'$ref': '#/definitions/DiaryEntry'}
                }
            }
        },
        '400': {'description': 'Invalid input'}
    }
})
def create_diary_entry():
    """Create a new diary entry from a working copy."""
    try:
        draft = EntryDraft.from_payload(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        entry = create_entry(draft)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating diary entry: {str(e)}')
        return jsonify({'error': 'Failed to create diary entry'}), 500

    return jsonify({
        'message': 'Diary entry created successfully',
        'entry': entry.to_dict()
    }), 201


@diary_bp.route('', methods=['GET'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Get all diary entries, newest first',
    'parameters': [
        {'name': 'page', 'in': 'query', 'type': 'integer', 'default': 1},
        {'name': 'per_page', 'in': 'query', 'type': 'integer'}
    ],
    'responses': {
        '200': {
            'description': 'List of diary entries',
            'schema': {
                'type': 'object',
                'properties': {
                    'entries': {
                        'type': 'array',
                        'items': {'$ref': '#/definitions/DiaryEntry'}
                    },
                    'total': {'type': 'integer'},
                    'pages': {'type': 'integer'},
                    'current_page': {'type': 'integer'}
                }
            }
        }
    }
})
def get_diary_entries():
    """Get all diary entries."""
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config['ENTRIES_PER_PAGE'], type=int)

    entries = DiaryEntry.query\
        .order_by(DiaryEntry.date.desc())\
        .paginate(page=page, per_page=per_page, error_out=False)

    return jsonify({
        'entries': [entry.to_dict() for entry in entries.items],
        'total': entries.total,
        'pages': entries.pages,
        'current_page': entries.page
    })


@diary_bp.route('/schema-modes', methods=['GET'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Get the schema modes grouped by category',
    'responses': {
        '200': {
            'description': 'Schema mode taxonomy',
            'schema': {
                'type': 'object',
                'properties': {
                    'categories': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {
                                'category': {'type': 'string'},
                                'modes': {'type': 'array', 'items': {'type': 'string'}}
                            }
                        }
                    }
                }
            }
        }
    }
})
def get_schema_modes():
    """List the schema mode taxonomy for pickers."""
    return jsonify({
        'categories': [
            {'category': category.value, 'modes': [mode.value for mode in modes]}
            for category, modes in grouped_modes()
        ]
    })


@diary_bp.route('/<entry_id>', methods=['GET'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Get a specific diary entry',
    'parameters': [ENTRY_ID],
    'responses': {
        '200': {
            'description': 'Diary entry details',
            'schema': {'$ref': '#/definitions/DiaryEntry'}
        },
        '404': {'description': 'Diary entry not found'}
    }
})
def get_diary_entry(entry_id):
    """Get a specific diary entry by ID."""
    entry = _get_entry(entry_id)

    if not entry:
        return jsonify({'error': 'Diary entry not found'}), 404

    return jsonify(entry.to_dict())


@diary_bp.route('/<entry_id>', methods=['PUT'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Replace a diary entry with an edited working copy. '
                   'Recordings the entry no longer references are deleted.',
    'parameters': [ENTRY_ID, ENTRY_BODY],
    'responses': {
        '200': {
            'description': 'Diary entry updated successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'message': {'type': 'string'},
                    'entry': {'$ref': '#/definitions/DiaryEntry'},
                    'deleted_recordings': {'type': 'array', 'items': {'type': 'string'}}
                }
            }
        },
        '400': {'description': 'Invalid input'},
        '404': {'description': 'Diary entry not found'}
    }
})
def update_diary_entry(entry_id):
    """Save an edit of a diary entry."""
    entry = _get_entry(entry_id)

    if not entry:
        return jsonify({'error': 'Diary entry not found'}), 404

    try:
        draft = EntryDraft.from_payload(request.get_json(silent=True))
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    try:
        removed = update_entry(entry, draft, audio)
    except Exception as e:
        current_app.logger.error(f'Error updating diary entry: {str(e)}')
        return jsonify({'error': 'Failed to update diary entry'}), 500

    return jsonify({
        'message': 'Diary entry updated successfully',
        'entry': entry.to_dict(),
        'deleted_recordings': sorted(removed)
    })


@diary_bp.route('/<entry_id>', methods=['DELETE'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Delete a diary entry and its recordings',
    'parameters': [ENTRY_ID],
    'responses': {
        '200': {'description': 'Diary entry deleted successfully'},
        '404': {'description': 'Diary entry not found'}
    }
})
def delete_diary_entry(entry_id):
    """Delete a diary entry."""
    entry = _get_entry(entry_id)

    if not entry:
        return jsonify({'error': 'Diary entry not found'}), 404

    try:
        removed = delete_entry(entry, audio)
    except Exception as e:
        current_app.logger.error(f'Error deleting diary entry: {str(e)}')
        return jsonify({'error': 'Failed to delete diary entry'}), 500

    return jsonify({
        'message': 'Diary entry deleted successfully',
        'deleted_recordings': removed
    })


@diary_bp.route('/drafts/discard', methods=['POST'])
@swag_from({
    'tags': ['Entries'],
    'description': 'Cancel a new or edit form. Recordings made in the draft '
                   'that the saved entry does not reference are deleted.',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'entry_id': {'type': 'string', 'description': 'Entry being edited, if any'},
                'fields': {'type': 'object'}
            }
        }
    }],
    'responses': {
        '200': {'description': 'Draft discarded'},
        '400': {'description': 'Invalid input'},
        '404': {'description': 'Diary entry not found'}
    }
})
def discard_diary_draft():
    """Discard a working copy without saving it."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    entry = None
    if data.get('entry_id'):
        entry = _get_entry(data['entry_id'])
        if not entry:
            return jsonify({'error': 'Diary entry not found'}), 404

    try:
        draft = EntryDraft.from_payload(data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    removed = discard_draft(draft, audio, entry)
    return jsonify({
        'message': 'Draft discarded',
        'deleted_recordings': sorted(removed)
    })
