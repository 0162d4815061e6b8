# Event and error codes
INVALID_JSON = 'INVALID_JSON'
MISSING_CONTENT = 'MISSING_CONTENT'
INVALID_CONTENT = 'INVALID_CONTENT'
PASTE_CREATED = 'PASTE_CREATED'
AUTHORITATIVE_UNAVAILABLE = 'AUTHORITATIVE_UNAVAILABLE'
WRITES_HALTED = 'WRITES_HALTED'
ID_SPACE_EXHAUSTED = 'ID_SPACE_EXHAUSTED'
STORAGE_ERROR = 'STORAGE_ERROR'
