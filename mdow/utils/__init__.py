from mdow.utils.idgen import generate_paste_id, collision_probability
from mdow.utils.expiry import compute_expires_at, is_live
from mdow.utils.helpers import base_url, get_paste_url, require_environment, guarantee_500_response
from mdow.utils.config import app_env, app_name, project_root, app_prefix, load_config
from mdow.utils.settings import PasteSettings, load_settings
from mdow.utils.logging import initialize_logging


__all__ = [
    'generate_paste_id',
    'collision_probability',
    'compute_expires_at',
    'is_live',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_paste_url',
    'require_environment',
    'guarantee_500_response',
    'PasteSettings',
    'load_settings',
    'initialize_logging',
]
