# Event and error codes
MISSING_PASTE_ID = 'MISSING_PASTE_ID'
PASTE_NOT_FOUND = 'PASTE_NOT_FOUND'
PASTE_SERVED = 'PASTE_SERVED'
STORAGE_ERROR = 'STORAGE_ERROR'
