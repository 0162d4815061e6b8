from mdow.dao.base import PasteBaseDAO
from mdow.dao.redis import PasteRedisDAO


__all__ = ['PasteBaseDAO', 'PasteRedisDAO']
