from mdow.dao.base.paste_base_dao import PasteBaseDAO


__all__ = ['PasteBaseDAO']
